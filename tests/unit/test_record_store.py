from datetime import date

import pytest
from sqlalchemy import text

from app.core.errors import RecordFormatError, StoreUnavailableError
from app.db.session import _engine_kwargs
from app.services.record_store import SqlRecordStore


@pytest.mark.asyncio
async def test_find_returns_exact_match_only(db_session, make_certificate):
    make_certificate()
    make_certificate(registration_no="JTI-GOD-PRO-047-2023", student_name="Sunita Devi")

    records = await SqlRecordStore(db_session).find("JTI-GOD-PRO-046-2023")

    assert len(records) == 1
    rec = records[0]
    assert rec.student_name == "Rupesh Kumar"
    assert rec.issue_date == date(2023, 6, 30)
    assert rec.created_at is not None


@pytest.mark.asyncio
async def test_find_is_case_sensitive_and_not_prefix(db_session, make_certificate):
    make_certificate()
    store = SqlRecordStore(db_session)

    assert await store.find("jti-god-pro-046-2023") == []
    assert await store.find("JTI-GOD-PRO-046") == []


@pytest.mark.asyncio
async def test_record_keeps_stored_name_literally(db_session, make_certificate):
    make_certificate(student_name="Rupesh  Kumar")
    [rec] = await SqlRecordStore(db_session).find("JTI-GOD-PRO-046-2023")
    assert rec.student_name == "Rupesh  Kumar"


@pytest.mark.asyncio
async def test_row_missing_fields_fails_fast(db_session, make_certificate):
    make_certificate(grade="", place="")

    with pytest.raises(RecordFormatError) as excinfo:
        await SqlRecordStore(db_session).find("JTI-GOD-PRO-046-2023")
    assert excinfo.value.details == {"fields": ["grade", "place"]}


@pytest.mark.asyncio
async def test_database_errors_become_store_unavailable(db_session):
    db_session.execute(text("DROP TABLE certificates"))

    with pytest.raises(StoreUnavailableError):
        await SqlRecordStore(db_session).find("JTI-GOD-PRO-046-2023")


def test_postgres_engine_bounds_statements_by_the_store_timeout():
    kwargs = _engine_kwargs("postgresql+psycopg://u:p@db/jti", 2.5)
    assert kwargs["connect_args"] == {"options": "-c statement_timeout=2500"}
    assert kwargs["pool_pre_ping"] is True


def test_sqlite_engine_is_shareable_with_the_threadpool():
    kwargs = _engine_kwargs("sqlite:///./data/certificates.db", 10)
    assert kwargs["connect_args"] == {"check_same_thread": False, "timeout": 10}
