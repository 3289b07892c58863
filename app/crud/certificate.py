from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select
from app.crud.base import CRUDBase
from app.models.certificate import Certificate
from app.schemas.certificate import CertificateCreate

class CRUDCertificate(CRUDBase[Certificate, CertificateCreate]):
    def find_by_registration_no(self, db: Session, registration_no: str) -> List[Certificate]:
        # igualdade exata; ordem de inserção para o caso (não esperado) de duplicados
        stmt = (
            select(Certificate)
            .where(Certificate.registration_no == registration_no)
            .order_by(Certificate.id)
        )
        return list(db.execute(stmt).scalars().all())

    def exists(self, db: Session, registration_no: str) -> bool:
        stmt = select(Certificate.id).where(Certificate.registration_no == registration_no).limit(1)
        return db.execute(stmt).first() is not None

    def list_recent(self, db: Session, skip: int = 0, limit: int = 100) -> List[Certificate]:
        stmt = (
            select(Certificate)
            .order_by(Certificate.created_at.desc(), Certificate.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(db.execute(stmt).scalars().all())

certificate_crud = CRUDCertificate(Certificate)
