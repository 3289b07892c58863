from datetime import date, datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Date, DateTime, func
from app.db.base_class import Base

# Nomes das colunas em camelCase, iguais aos campos já gravados.
class Certificate(Base):
    __tablename__ = "certificates"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    serial_no: Mapped[str] = mapped_column("serialNo", String(40))
    registration_no: Mapped[str] = mapped_column("registrationNo", String(80), unique=True, index=True)
    student_name: Mapped[str] = mapped_column("studentName", String(160))
    guardian_name: Mapped[str] = mapped_column("guardianName", String(160))
    course_name: Mapped[str] = mapped_column("courseName", String(200))
    duration: Mapped[str] = mapped_column(String(60))
    grade: Mapped[str] = mapped_column(String(20))
    issue_date: Mapped[date] = mapped_column("issueDate", Date)
    place: Mapped[str] = mapped_column(String(120))
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(timezone=True), server_default=func.now())
