"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field

from app.schemas.admins import AdminResponse


class LoginRequest(BaseModel):
    """Admin login credentials."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Issued access token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    admin: AdminResponse
