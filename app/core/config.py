# app/core/config.py
import os
from typing import ClassVar, List
from pydantic import BaseModel, Field

def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'certificates.db')}")

def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}

def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]

class Settings(BaseModel):
    # Constante (não vira campo Pydantic)
    DATA_DIR: ClassVar[str] = os.path.abspath(os.getenv("DATA_DIR", "./data"))

    PROJECT_NAME: str = "JTI Certificate Service"
    INSTITUTE_NAME: str = Field(default_factory=lambda: os.getenv("INSTITUTE_NAME", "Jharkhand Technical Institute"))

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: _env_bool("RUN_MIGRATIONS_ON_STARTUP", "true"))

    # Assina os tokens da sessão de verificação
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    VERIFICATION_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("VERIFICATION_TOKEN_EXPIRE_MINUTES", "30")))

    # Tokens de admin vêm do provedor de identidade externo
    IDENTITY_JWT_SECRET: str = Field(default_factory=lambda: os.getenv("IDENTITY_JWT_SECRET", "CHANGE_ME_IDENTITY_SECRET"))
    ADMIN_ROLE: str = Field(default_factory=lambda: os.getenv("ADMIN_ROLE", "admin"))

    RECORD_STORE_TIMEOUT_SECONDS: float = Field(default_factory=lambda: float(os.getenv("RECORD_STORE_TIMEOUT_SECONDS", "10")))

    PUBLIC_BASE_URL: str = Field(default_factory=lambda: os.getenv("PUBLIC_BASE_URL", ""))
    CERTIFICATE_BACKGROUND_URL: str = Field(
        default_factory=lambda: os.getenv(
            "CERTIFICATE_BACKGROUND_URL",
            "https://raw.githubusercontent.com/akm12109/image_bg_assets/main/JTI/certificate-bg.png",
        )
    )

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    DEBUG: bool = Field(default_factory=lambda: _env_bool("DEBUG", "false"))

settings = Settings()
