"""Auth domain schemas.

Request and response schemas for authentication operations.
"""

from pydantic import BaseModel, EmailStr, Field

from fitback.user.schemas import CamelModel, UserProfile


class SignUpRequest(UserProfile):
    """Request schema for user registration. Every field is required."""

    email: EmailStr
    password: str = Field(min_length=1)


class SignInRequest(BaseModel):
    """Request schema for email/password sign-in."""

    email: EmailStr
    password: str = Field(min_length=1)


class SignInResponse(CamelModel):
    """Response schema for a successful sign-in."""

    message: str
    token: str
    user_id: str


class PasswordResetRequest(BaseModel):
    """Request schema for password reset."""

    email: EmailStr


class AuthStatusResponse(CamelModel):
    """Response schema for check-auth."""

    message: str
    user_id: str


class AuthMessage(BaseModel):
    """Generic auth message response."""

    message: str
