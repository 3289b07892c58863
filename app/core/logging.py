# app/core/logging.py
import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> logging.Logger:
    """Configura o logging raiz da aplicação (stdout, nível via LOG_LEVEL)."""
    log_level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("xhtml2pdf").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Logging configured. Level: %s", settings.LOG_LEVEL)
    return logger
