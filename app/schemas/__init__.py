"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RevokeTokenResponse,
    TokenInfoResponse,
)
from app.schemas.config import (
    ConfigSectionResponse,
    ConfigSummaryResponse,
    ConfigValidationResponse,
    SectionValidation,
)
from app.schemas.health import (
    DetailedHealthResponse,
    HealthCheckDetail,
    HealthResponse,
    HealthTagsResponse,
)
from app.schemas.user import UserCreate, UserResponse, UsersListResponse, UserUpdate

__all__ = [
    "AuthResponse",
    "ConfigSectionResponse",
    "ConfigSummaryResponse",
    "ConfigValidationResponse",
    "DetailedHealthResponse",
    "HealthCheckDetail",
    "HealthResponse",
    "HealthTagsResponse",
    "LoginRequest",
    "RegisterRequest",
    "RevokeTokenResponse",
    "SectionValidation",
    "TokenInfoResponse",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    "UsersListResponse",
]
