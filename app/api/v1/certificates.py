# app/api/v1/certificates.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.config import settings
from app.core.errors import DuplicateCertificateError
from app.core.rbac import require_roles
from app.crud.certificate import certificate_crud
from app.models.certificate import Certificate
from app.schemas.certificate import CertificateCreate, CertificateOut
from app.services.activity import log_activity

router = APIRouter(dependencies=[Depends(require_roles(settings.ADMIN_ROLE))])

def _to_out(c: Certificate) -> CertificateOut:
    return CertificateOut(
        id=c.id,
        serial_no=c.serial_no,
        registration_no=c.registration_no,
        student_name=c.student_name,
        guardian_name=c.guardian_name,
        course_name=c.course_name,
        duration=c.duration,
        grade=c.grade,
        issue_date=c.issue_date,
        place=c.place,
        created_at=c.created_at,
    )

@router.post("/", response_model=CertificateOut, status_code=status.HTTP_201_CREATED)
def issue_certificate(
    body: CertificateCreate,
    db: Session = Depends(get_db),
):
    if certificate_crud.exists(db, body.registration_no):
        raise DuplicateCertificateError(details={"registrationNo": body.registration_no})

    cert = certificate_crud.create(db, body)
    log_activity(
        db,
        "certificate_issued",
        f"Certificate {cert.registration_no} issued for {cert.course_name}",
        link="/admin/certificates",
        registrationNo=cert.registration_no,
    )
    return _to_out(cert)

@router.get("/", response_model=List[CertificateOut])
def list_certificates(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    rows = certificate_crud.list_recent(db, skip=(page - 1) * page_size, limit=page_size)
    return [_to_out(c) for c in rows]
