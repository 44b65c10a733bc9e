"""API response schemas for FastAPI endpoints."""

from pydantic import BaseModel


class TokenResponse(BaseModel):
    access_token: str
    expires_on: int
    resource: str


class HealthResponse(BaseModel):
    status: str
    version: str
    file_challenge_auth: bool
    pending_challenges: int
