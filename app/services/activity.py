# app/services/activity.py
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.activity import ActivityLog

logger = logging.getLogger(__name__)

ACTIVITY_TYPES = {"certificate_issued"}

def log_activity(db: Session, type: str, description: str, link: Optional[str] = None, **extra: Any) -> Optional[ActivityLog]:
    """Registra uma atividade para o painel do admin.

    Não bloqueia quem chamou: falha ao gravar só vai para o log.
    """
    if type not in ACTIVITY_TYPES:
        raise ValueError(f"Unknown activity type: {type}")
    payload = {"description": description, **extra}
    if link:
        payload["link"] = link
    entry = ActivityLog(type=type, payload=payload)
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to log activity %s", type)
        return None
    return entry
