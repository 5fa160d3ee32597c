from typing import Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error envelope shared by every endpoint"""
    status: str = "error"
    message: str


class AuthResponse(BaseModel):
    """Successful authentication. expires_at is an ISO timestamp or "lifetime"."""
    status: str = "success"
    expires_at: str
    duration_days: int
    discord: Optional[str] = None


class HeartbeatResponse(BaseModel):
    status: str = "ok"
    extended_by_hours: int


class OkResponse(BaseModel):
    status: str = "ok"


class SyncResponse(BaseModel):
    status: str = "ok"
    count: int


class KeyCountsResponse(BaseModel):
    total: int
    active: int


class HealthResponse(BaseModel):
    status: str = "online"
    timestamp: str
    keys: KeyCountsResponse

