# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1 import (
    health,
    verification,
    certificates,
)

api_router = APIRouter()

api_router.include_router(health.router,        tags=["health"])
# público: fluxo de verificação em três passos
api_router.include_router(verification.router,  prefix="/verify",       tags=["verification"])
# admin: emissão e listagem
api_router.include_router(certificates.router,  prefix="/certificates", tags=["certificates"])
