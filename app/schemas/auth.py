"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, EmailStr, Field

from app.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """New account; display_name defaults to the username."""

    username: str = Field(..., min_length=3, max_length=50, description="Username")
    email: EmailStr = Field(..., max_length=100, description="Email address")
    password: str = Field(..., min_length=8, max_length=128, description="Password")
    display_name: str | None = Field(default=None, min_length=1, max_length=100)


class LoginRequest(BaseModel):
    """Credentials for login. username may also be the account email."""

    username: str = Field(..., min_length=1, max_length=100, description="Username or email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class AuthResponse(BaseModel):
    """JWT access token plus the authenticated user."""

    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    user: UserResponse
    message: str


class TokenInfoResponse(BaseModel):
    """Claims of the current request after role revalidation."""

    user_id: int
    username: str
    email: str
    security_stamp: str
    is_admin: bool
    has_user_role: bool
    has_admin_role: bool


class RevokeTokenResponse(BaseModel):
    message: str
    user_id: int
