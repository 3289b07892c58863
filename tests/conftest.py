import os

# Antes de importar a app: sem migrations no startup e sem imagem remota no PDF
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("CERTIFICATE_BACKGROUND_URL", "")
os.environ.setdefault("PUBLIC_BASE_URL", "")

from datetime import date  # noqa: E402
from typing import Iterable, List, Optional  # noqa: E402

import asyncio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.errors import RenderError  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.certificate import Certificate  # noqa: E402
from app.schemas.certificate import CertificateRecord  # noqa: E402
from app.services.certificates import RenderedCertificate  # noqa: E402

# -----------------------------------------------------------------------------
# Dados de exemplo
# -----------------------------------------------------------------------------

def build_record(**overrides) -> CertificateRecord:
    data = {
        "serialNo": "046/2023",
        "registrationNo": "JTI-GOD-PRO-046-2023",
        "studentName": "Rupesh Kumar",
        "guardianName": "Yogendra Mal",
        "courseName": "DIPLOMA IN COMPUTER PROGRAMMING (DCP)",
        "duration": "06TH MONTHS",
        "grade": "A+",
        "issueDate": date(2023, 6, 30),
        "place": "GODDA",
    }
    data.update(overrides)
    return CertificateRecord.model_validate(data)


class FakeStore:
    """Record store em memória; `gate` segura a consulta até ser liberado."""

    def __init__(self, records: Iterable[CertificateRecord] = (), error: Optional[Exception] = None):
        self.records = list(records)
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[str] = []

    async def find(self, registration_no: str) -> List[CertificateRecord]:
        self.calls.append(registration_no)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return [r for r in self.records if r.registration_no == registration_no]


class FakeRenderer:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.rendered: List[CertificateRecord] = []

    async def render(self, record: CertificateRecord) -> RenderedCertificate:
        if self.fail:
            raise RenderError()
        self.rendered.append(record)
        return RenderedCertificate(
            filename=f"Certificate-{record.student_name}-{record.registration_no}.pdf",
            content=b"%PDF-1.4 fake",
        )


@pytest.fixture
def record() -> CertificateRecord:
    return build_record()

# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="function")
def db_engine():
    """SQLite em memória, uma conexão compartilhada (StaticPool) por teste."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    session = sessionmaker(bind=db_engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def make_certificate(db_session):
    def _make(**overrides) -> Certificate:
        data = dict(
            serial_no="046/2023",
            registration_no="JTI-GOD-PRO-046-2023",
            student_name="Rupesh Kumar",
            guardian_name="Yogendra Mal",
            course_name="DIPLOMA IN COMPUTER PROGRAMMING (DCP)",
            duration="06TH MONTHS",
            grade="A+",
            issue_date=date(2023, 6, 30),
            place="GODDA",
        )
        data.update(overrides)
        cert = Certificate(**data)
        db_session.add(cert)
        db_session.commit()
        db_session.refresh(cert)
        return cert
    return _make

# -----------------------------------------------------------------------------
# Client Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="function")
def client(db_session):
    """TestClient com get_db apontando para a sessão isolada do teste."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_access_token(roles=("admin",), **claims) -> str:
    payload = {"type": "access", "sub": "admin@jti.test", "roles": list(roles)}
    payload.update(claims)
    return jwt.encode(payload, settings.IDENTITY_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_access_token()}"}
