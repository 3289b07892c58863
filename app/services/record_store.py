# app/services/record_store.py
"""Acesso de leitura à coleção de certificados usada pela verificação."""
from __future__ import annotations

import logging
from typing import List, Protocol

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.core.errors import RecordFormatError, StoreUnavailableError
from app.crud.certificate import certificate_crud
from app.models.certificate import Certificate
from app.schemas.certificate import CertificateRecord

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    async def find(self, registration_no: str) -> List[CertificateRecord]:
        """Certificados cujo `registrationNo` é exatamente `registration_no`."""
        ...


def to_record(row: Certificate) -> CertificateRecord:
    try:
        return CertificateRecord.model_validate(
            {
                "serialNo": row.serial_no,
                "registrationNo": row.registration_no,
                "studentName": row.student_name,
                "guardianName": row.guardian_name,
                "courseName": row.course_name,
                "duration": row.duration,
                "grade": row.grade,
                "issueDate": row.issue_date,
                "place": row.place,
                "createdAt": row.created_at,
            }
        )
    except PydanticValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise RecordFormatError(
            f"Certificate {row.id} is missing required fields",
            details={"fields": fields},
        ) from exc


class SqlRecordStore:
    def __init__(self, db: Session):
        self.db = db

    def _find_sync(self, registration_no: str) -> List[CertificateRecord]:
        try:
            rows = certificate_crud.find_by_registration_no(self.db, registration_no)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(details=type(exc).__name__) from exc
        return [to_record(row) for row in rows]

    async def find(self, registration_no: str) -> List[CertificateRecord]:
        return await run_in_threadpool(self._find_sync, registration_no)
