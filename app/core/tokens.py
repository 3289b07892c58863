# app/core/tokens.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from app.core.config import settings

ALGO = settings.ALGORITHM

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _exp(minutes: int = 15) -> datetime:
    return _now() + timedelta(minutes=minutes)

def create_verification_token(*, step: str, registration_no: str = "", masked_name: str = "") -> str:
    """Token curto que carrega a sessão de verificação entre requisições.

    Só leva o passo, o nº de registro e o nome mascarado: o payload de um JWT é
    legível pelo cliente, então nada protegido do certificado entra aqui.
    """
    payload: Dict[str, Any] = {
        "type": "verification",
        "step": step,
        "reg": registration_no,
        "masked": masked_name,
        "jti": uuid.uuid4().hex,
        "iat": int(_now().timestamp()),
        "exp": int(_exp(settings.VERIFICATION_TOKEN_EXPIRE_MINUTES).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGO)

def decode_verification(token: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGO])
    except JWTError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != "verification":
        return None
    if payload.get("step") not in {"initial", "confirm", "verified"}:
        return None
    if payload.get("step") != "initial" and not payload.get("reg"):
        return None
    return payload

def decode_access(token: str) -> Optional[Dict[str, Any]]:
    """Valida o access token emitido pelo provedor de identidade externo."""
    try:
        payload = jwt.decode(token, settings.IDENTITY_JWT_SECRET, algorithms=[ALGO])
    except JWTError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != "access":
        return None
    if not payload.get("sub"):
        return None
    return payload
