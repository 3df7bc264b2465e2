"""Schemas for user CRUD endpoints. Password hashes and stamps are never returned."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.user import Role


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    display_name: str
    role: Role


class UserCreate(BaseModel):
    """Admin-side account creation."""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr = Field(..., max_length=100)
    password: str = Field(..., min_length=8, max_length=128)
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    role: Role = Role.USER


class UserUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged. Only admins may set role."""

    username: str | None = Field(default=None, min_length=3, max_length=50)
    email: EmailStr | None = Field(default=None, max_length=100)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    role: Role | None = None


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserResponse]
