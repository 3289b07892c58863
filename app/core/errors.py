# app/core/errors.py
"""
Erros do fluxo de verificação de certificados e handlers globais.

Todas as respostas de erro seguem o formato:
    {"code": "...", "message": "...", "details": ...}
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.core.config import settings

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "No certificate found with this registration number. Please check and try again."
NAME_MISMATCH_MESSAGE = "The name does not match the record. Please check and try again."
STORE_UNAVAILABLE_MESSAGE = "An error occurred while searching. Please try again later."
RENDER_FAILED_MESSAGE = "Failed to generate PDF. Please try again."


class CertificateServiceError(Exception):
    status_code: int = 500
    code: str = "SERVICE_ERROR"
    default_message: str = "Erro interno."

    def __init__(self, message: Optional[str] = None, *, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(CertificateServiceError):
    status_code = 422
    code = "VALIDATION_ERROR"
    default_message = "Registration number is required."


class InvalidTransitionError(CertificateServiceError):
    status_code = 409
    code = "INVALID_TRANSITION"
    default_message = "This action is not available at the current verification step."


class DuplicateCertificateError(CertificateServiceError):
    status_code = 409
    code = "UNIQUE_VIOLATION"
    default_message = "Registration number already issued."


class SessionTokenError(CertificateServiceError):
    status_code = 401
    code = "INVALID_SESSION"
    default_message = "Verification session is missing or has expired. Please start over."


class StoreUnavailableError(CertificateServiceError):
    status_code = 503
    code = "STORE_UNAVAILABLE"
    default_message = STORE_UNAVAILABLE_MESSAGE


class RecordFormatError(StoreUnavailableError):
    code = "RECORD_FORMAT_ERROR"


class RenderError(CertificateServiceError):
    status_code = 500
    code = "RENDER_FAILED"
    default_message = RENDER_FAILED_MESSAGE


def _error_body(code: str, message: str, details: Any = None) -> dict:
    return {"code": code, "message": message, "details": details}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CertificateServiceError)
    async def handle_service_error(request: Request, exc: CertificateServiceError):
        if exc.status_code >= 500:
            logger.warning("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, exc.details),
        )

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        return JSONResponse(
            status_code=409,
            content=_error_body("UNIQUE_VIOLATION", "Registro duplicado.", str(getattr(exc, "orig", exc))),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        details = {"error_type": type(exc).__name__, "message": str(exc)} if settings.DEBUG else None
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "Erro interno.", details),
        )
