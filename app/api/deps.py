from typing import Any, Dict

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.tokens import decode_access
from app.services.certificates import PdfCertificateRenderer
from app.services.record_store import SqlRecordStore

# ----------------------------------------------------------------------
# Lê o Bearer do header Authorization (sem usar OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return parts[1]

# ----------------------------------------------------------------------
# Identidade vem do provedor externo; aqui só validamos o token
# ----------------------------------------------------------------------
def get_current_principal(token: str = Depends(get_bearer_token)) -> Dict[str, Any]:
    payload = decode_access(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid token")
    return payload

def get_record_store(db: Session = Depends(get_db)) -> SqlRecordStore:
    return SqlRecordStore(db)

def get_renderer() -> PdfCertificateRenderer:
    return PdfCertificateRenderer()
