# app/db/base.py
from app.db.base_class import Base  # noqa: F401

# IMPORTE TODOS OS MODELS AQUI (Alembic e os testes leem o metadata daqui)
from app.models.certificate import Certificate  # noqa: F401
from app.models.activity import ActivityLog  # noqa: F401
