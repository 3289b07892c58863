import pytest
from jose import jwt

from app.core.config import settings
from app.core.errors import NOT_FOUND_MESSAGE, SessionTokenError
from app.core.tokens import create_verification_token, decode_verification
from app.services.verification import (
    VerificationFlow,
    VerificationSession,
    VerificationStep,
    session_from_token,
    session_to_token,
)
from conftest import FakeStore


@pytest.mark.asyncio
async def test_token_round_trip_restores_confirm_step(record):
    store = FakeStore([record])
    flow = VerificationFlow(store)
    session = await flow.search(record.registration_no)

    restored = await session_from_token(session_to_token(session), store)

    assert restored.step == VerificationStep.confirm
    assert restored.found_record == record
    assert restored.masked_name == "R****h K****r"


@pytest.mark.asyncio
async def test_token_never_carries_the_student_name(record):
    flow = VerificationFlow(FakeStore([record]))
    await flow.search(record.registration_no)
    flow.confirm_name("Rupesh Kumar")

    claims = jwt.get_unverified_claims(session_to_token(flow.session))

    assert claims["step"] == "verified"
    assert claims["reg"] == record.registration_no
    assert "Rupesh" not in str(claims)


@pytest.mark.asyncio
async def test_initial_token_does_not_touch_the_store():
    store = FakeStore()
    restored = await session_from_token(session_to_token(VerificationSession()), store)
    assert restored == VerificationSession()
    assert store.calls == []


@pytest.mark.asyncio
async def test_record_removed_between_steps_restarts_session(record):
    token = create_verification_token(step="confirm", registration_no=record.registration_no, masked_name="R****h K****r")
    restored = await session_from_token(token, FakeStore())

    assert restored.step == VerificationStep.initial
    assert restored.error_message == NOT_FOUND_MESSAGE


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
async def test_missing_or_garbage_token_is_rejected(token):
    with pytest.raises(SessionTokenError):
        await session_from_token(token, FakeStore())


@pytest.mark.asyncio
async def test_token_signed_with_other_key_is_rejected(record):
    forged = jwt.encode(
        {"type": "verification", "step": "verified", "reg": record.registration_no},
        "some-other-secret",
        algorithm="HS256",
    )
    with pytest.raises(SessionTokenError):
        await session_from_token(forged, FakeStore([record]))


def test_decode_rejects_wrong_type():
    token = jwt.encode({"type": "access", "step": "initial"}, settings.SECRET_KEY, algorithm="HS256")
    assert decode_verification(token) is None


def test_decode_rejects_confirm_without_registration_number():
    token = create_verification_token(step="confirm")
    assert decode_verification(token) is None


def test_decode_rejects_expired_token(monkeypatch):
    monkeypatch.setattr(settings, "VERIFICATION_TOKEN_EXPIRE_MINUTES", -1)
    token = create_verification_token(step="initial")
    assert decode_verification(token) is None
