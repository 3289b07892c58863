from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.certificate import CertificateRecord

class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    registration_no: str = Field(alias="registrationNo")

class ConfirmRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    full_name: str = Field(alias="fullName")

class SessionView(BaseModel):
    """O que o cliente enxerga da sessão; `certificate` só depois de verificado."""
    model_config = ConfigDict(populate_by_name=True)

    step: str
    masked_name: str = Field(default="", alias="maskedName")
    error_message: Optional[str] = Field(default=None, alias="errorMessage")
    session_token: str = Field(alias="sessionToken")
    certificate: Optional[CertificateRecord] = None
