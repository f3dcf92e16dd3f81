from pydantic import BaseModel, EmailStr, Field
from datetime import datetime


class SignUpRequest(BaseModel):
    """Schema for creating a new account."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72, description="6 to 72 characters")
    full_name: str | None = Field(default=None, max_length=255)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Schema for user response."""
    id: str
    email: str
    full_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class SessionMetadata(BaseModel):
    full_name: str | None = None
    avatar_url: str | None = None


class SessionResponse(BaseModel):
    """The identity behind the current bearer token."""
    id: str
    email: str
    metadata: SessionMetadata


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
