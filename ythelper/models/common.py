from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str


class BackendStatus(BaseModel):
    configured: bool
    model: str


class StatusResponse(BaseModel):
    gemini: BackendStatus
