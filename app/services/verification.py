# app/services/verification.py
"""
Fluxo público de verificação de certificados.

    initial --search--> confirm --confirm_name--> verified --download--> (PDF)
       ^___________________reset (de qualquer passo)_______________|

Antes de `verified` o chamador só enxerga o nome mascarado; os campos do
certificado (nome completo, curso, nota...) só são liberados depois que o nome
completo informado bate com o registro.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from app.core.config import settings
from app.core.errors import (
    NAME_MISMATCH_MESSAGE,
    NOT_FOUND_MESSAGE,
    STORE_UNAVAILABLE_MESSAGE,
    InvalidTransitionError,
    RenderError,
    SessionTokenError,
    StoreUnavailableError,
    ValidationError,
)
from app.core.tokens import create_verification_token, decode_verification
from app.schemas.certificate import CertificateRecord
from app.services.certificates import ArtifactRenderer, RenderedCertificate
from app.services.masking import mask_name
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class VerificationStep(str, Enum):
    initial = "initial"
    confirm = "confirm"
    verified = "verified"


class VerificationSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: VerificationStep = VerificationStep.initial
    found_record: Optional[CertificateRecord] = None
    masked_name: str = ""
    error_message: Optional[str] = None

    @model_validator(mode="after")
    def _record_follows_step(self):
        if (self.step == VerificationStep.initial) != (self.found_record is None):
            raise ValueError("found_record must be set exactly when step is confirm or verified")
        return self

    @property
    def disclosed_record(self) -> Optional[CertificateRecord]:
        if self.step == VerificationStep.verified:
            return self.found_record
        return None


async def _query(store: RecordStore, registration_no: str, timeout: float) -> List[CertificateRecord]:
    try:
        return await asyncio.wait_for(store.find(registration_no), timeout=timeout)
    except StoreUnavailableError:
        raise
    except asyncio.TimeoutError as exc:
        raise StoreUnavailableError(details="timeout") from exc
    except Exception as exc:
        raise StoreUnavailableError(details=type(exc).__name__) from exc


class VerificationFlow:
    def __init__(
        self,
        store: RecordStore,
        renderer: Optional[ArtifactRenderer] = None,
        session: Optional[VerificationSession] = None,
        *,
        timeout: Optional[float] = None,
    ):
        self._store = store
        self._renderer = renderer
        self._session = session or VerificationSession()
        self._timeout = settings.RECORD_STORE_TIMEOUT_SECONDS if timeout is None else timeout
        # reset() incrementa; resultados de chamadas antigas são descartados
        self._generation = 0
        self._pending = False

    @property
    def session(self) -> VerificationSession:
        return self._session

    @property
    def busy(self) -> bool:
        return self._pending

    def _require(self, step: VerificationStep, action: str) -> None:
        if self._pending:
            raise InvalidTransitionError("A verification step is already in progress.")
        if self._session.step != step:
            raise InvalidTransitionError(
                f"'{action}' is only available from the '{step.value}' step.",
                details={"step": self._session.step.value},
            )

    async def search(self, registration_no: str) -> VerificationSession:
        self._require(VerificationStep.initial, "search")
        reg = (registration_no or "").strip()
        if not reg:
            raise ValidationError()

        generation = self._generation
        self._pending = True
        try:
            records = await _query(self._store, reg, self._timeout)
        except StoreUnavailableError:
            logger.exception("Certificate lookup failed for %s", reg)
            outcome = VerificationSession(error_message=STORE_UNAVAILABLE_MESSAGE)
        else:
            if not records:
                logger.info("No certificate found for %s", reg)
                outcome = VerificationSession(error_message=NOT_FOUND_MESSAGE)
            else:
                if len(records) > 1:
                    logger.warning("Registration number %s matched %d certificates; using the first", reg, len(records))
                record = records[0]
                outcome = VerificationSession(
                    step=VerificationStep.confirm,
                    found_record=record,
                    masked_name=mask_name(record.student_name),
                )
        finally:
            if generation == self._generation:
                self._pending = False

        if generation != self._generation:
            return self._session
        self._session = outcome
        return outcome

    def confirm_name(self, claimed_full_name: str) -> VerificationSession:
        self._require(VerificationStep.confirm, "confirm_name")
        current = self._session
        record = current.found_record
        # trim + lower, sem colapsar espaços internos
        if (claimed_full_name or "").strip().lower() == record.student_name.lower():
            self._session = VerificationSession(
                step=VerificationStep.verified,
                found_record=record,
                masked_name=current.masked_name,
            )
            logger.info("Certificate %s verified", record.registration_no)
        else:
            self._session = current.model_copy(update={"error_message": NAME_MISMATCH_MESSAGE})
        return self._session

    def reset(self) -> VerificationSession:
        self._generation += 1
        self._pending = False
        self._session = VerificationSession()
        return self._session

    async def download(self) -> RenderedCertificate:
        self._require(VerificationStep.verified, "download")
        if self._renderer is None:
            raise RenderError("No certificate renderer is configured.")

        record = self._session.found_record
        generation = self._generation
        self._pending = True
        try:
            artifact = await self._renderer.render(record)
        except RenderError:
            raise
        except Exception as exc:
            logger.exception("Renderer failed for %s", record.registration_no)
            raise RenderError(details=type(exc).__name__) from exc
        finally:
            if generation == self._generation:
                self._pending = False

        if generation != self._generation:
            # reset() durante a renderização: o PDF é descartado
            raise InvalidTransitionError("Verification was reset while the certificate was being generated.")
        return artifact


# ------------------- sessão <-> token (HTTP) -------------------

def session_to_token(session: VerificationSession) -> str:
    record = session.found_record
    return create_verification_token(
        step=session.step.value,
        registration_no=record.registration_no if record else "",
        masked_name=session.masked_name,
    )


async def session_from_token(
    token: Optional[str],
    store: RecordStore,
    *,
    timeout: Optional[float] = None,
) -> VerificationSession:
    if not token:
        raise SessionTokenError()
    payload = decode_verification(token)
    if payload is None:
        raise SessionTokenError()

    step = VerificationStep(payload["step"])
    if step == VerificationStep.initial:
        return VerificationSession()

    records = await _query(
        store,
        payload["reg"],
        settings.RECORD_STORE_TIMEOUT_SECONDS if timeout is None else timeout,
    )
    if not records:
        # removido pelo admin entre um passo e outro
        return VerificationSession(error_message=NOT_FOUND_MESSAGE)
    return VerificationSession(step=step, found_record=records[0], masked_name=payload.get("masked") or "")
