"""
Auth feature: Pydantic schemas for request/response models.
"""

from pydantic import BaseModel, EmailStr, Field


# ── Requests ─────────────────────────────────────────────
class CredentialsRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


# ── Responses ────────────────────────────────────────────
class UserResponse(BaseModel):
    id: str
    email: str | None = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
