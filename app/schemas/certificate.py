from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

class CertificateRecord(BaseModel):
    """Certificado emitido, no formato validado que sai do record store."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    serial_no: str = Field(alias="serialNo", min_length=1)
    registration_no: str = Field(alias="registrationNo", min_length=1)
    student_name: str = Field(alias="studentName", min_length=1)
    guardian_name: str = Field(alias="guardianName", min_length=1)
    course_name: str = Field(alias="courseName", min_length=1)
    duration: str = Field(min_length=1)
    grade: str = Field(min_length=1)
    issue_date: date = Field(alias="issueDate")
    place: str = Field(min_length=1)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @field_validator("issue_date", mode="before")
    @classmethod
    def _date_from_timestamp(cls, v):
        if isinstance(v, datetime):
            return v.date()
        return v

class CertificateCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    serial_no: str = Field(alias="serialNo", min_length=1)
    registration_no: str = Field(alias="registrationNo", min_length=1)
    student_name: str = Field(alias="studentName", min_length=2)
    guardian_name: str = Field(alias="guardianName", min_length=2)
    course_name: str = Field(default="DIPLOMA IN COMPUTER PROGRAMMING (DCP)", alias="courseName", min_length=2)
    duration: str = Field(default="06TH MONTHS", min_length=1)
    grade: str = Field(default="A+", min_length=1)
    issue_date: date = Field(default_factory=date.today, alias="issueDate")
    place: str = Field(default="GODDA", min_length=2)

    @field_validator("registration_no")
    @classmethod
    def _no_slashes(cls, v: str) -> str:
        if "/" in v:
            raise ValueError("Registration number cannot contain slashes.")
        return v

class CertificateOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    serial_no: str = Field(alias="serialNo")
    registration_no: str = Field(alias="registrationNo")
    student_name: str = Field(alias="studentName")
    guardian_name: str = Field(alias="guardianName")
    course_name: str = Field(alias="courseName")
    duration: str
    grade: str
    issue_date: date = Field(alias="issueDate")
    place: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
