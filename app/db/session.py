from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings

def _normalize(url: str) -> str:
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url and url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url

def _engine_kwargs(url: str, timeout_seconds: float) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"pool_pre_ping": True}
    # o asyncio.wait_for da verificação não cancela a query na thread;
    # o limite tem de valer também no servidor
    if url.startswith("postgresql"):
        kwargs["connect_args"] = {"options": f"-c statement_timeout={int(timeout_seconds * 1000)}"}
    elif url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": timeout_seconds}
    return kwargs

SQLALCHEMY_DATABASE_URL = _normalize(settings.DATABASE_URL)

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    **_engine_kwargs(SQLALCHEMY_DATABASE_URL, settings.RECORD_STORE_TIMEOUT_SECONDS),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
