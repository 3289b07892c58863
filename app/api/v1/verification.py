# app/api/v1/verification.py
"""
Verificação pública de certificados (sem login).

A sessão fica com o cliente: cada resposta traz `sessionToken`, que deve voltar
no header X-Verification-Session no passo seguinte.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Header
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from app.api.deps import get_record_store, get_renderer
from app.schemas.verification import ConfirmRequest, SearchRequest, SessionView
from app.services.certificates import PdfCertificateRenderer
from app.services.record_store import SqlRecordStore
from app.services.verification import (
    VerificationFlow,
    VerificationSession,
    VerificationStep,
    session_from_token,
    session_to_token,
)

router = APIRouter()

SESSION_HEADER = "X-Verification-Session"

def _to_view(session: VerificationSession) -> SessionView:
    return SessionView(
        step=session.step.value,
        masked_name=session.masked_name,
        error_message=session.error_message,
        session_token=session_to_token(session),
        certificate=session.disclosed_record,
    )

def _content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"

def _record_gone(session: VerificationSession) -> bool:
    # certificado removido entre um passo e outro: a sessão volta ao início com o aviso
    return session.step == VerificationStep.initial and session.error_message is not None

@router.post("/search", response_model=SessionView)
async def search_certificate(
    body: SearchRequest,
    store: SqlRecordStore = Depends(get_record_store),
):
    # toda busca começa uma sessão nova
    flow = VerificationFlow(store)
    session = await flow.search(body.registration_no)
    return _to_view(session)

@router.post("/confirm", response_model=SessionView)
async def confirm_name(
    body: ConfirmRequest,
    token: Optional[str] = Header(None, alias=SESSION_HEADER),
    store: SqlRecordStore = Depends(get_record_store),
):
    restored = await session_from_token(token, store)
    if _record_gone(restored):
        return _to_view(restored)
    flow = VerificationFlow(store, session=restored)
    session = flow.confirm_name(body.full_name)
    return _to_view(session)

@router.post("/reset", response_model=SessionView)
def reset_session():
    return _to_view(VerificationSession())

@router.get("/session", response_model=SessionView)
async def current_session(
    token: Optional[str] = Header(None, alias=SESSION_HEADER),
    store: SqlRecordStore = Depends(get_record_store),
):
    return _to_view(await session_from_token(token, store))

@router.post("/download")
async def download_certificate(
    token: Optional[str] = Header(None, alias=SESSION_HEADER),
    store: SqlRecordStore = Depends(get_record_store),
    renderer: PdfCertificateRenderer = Depends(get_renderer),
):
    restored = await session_from_token(token, store)
    if _record_gone(restored):
        return JSONResponse(content=jsonable_encoder(_to_view(restored)))
    flow = VerificationFlow(store, renderer, session=restored)
    artifact = await flow.download()
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": _content_disposition(artifact.filename)},
    )
