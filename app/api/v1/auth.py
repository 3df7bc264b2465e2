"""Registration, login, profile, token introspection and self token revocation."""

import logging

from fastapi import APIRouter, HTTPException, status

from app.api.deps import AdminPrincipal, AppSettings, AuthenticatedPrincipal, DbSession
from app.core.claims import (
    get_email,
    get_security_stamp,
    get_user_id,
    get_username,
    has_role,
    is_admin,
)
from app.core.security import create_access_token
from app.models.user import Role
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RevokeTokenResponse,
    TokenInfoResponse,
)
from app.schemas.user import UserResponse
from app.services.users import (
    UserConflictError,
    UserNotFoundError,
    authenticate,
    get_user,
    register_user,
    revoke_tokens,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse)
def register(body: RegisterRequest, db: DbSession, settings: AppSettings) -> AuthResponse:
    """
    Create an account with role User and return a token for it.
    400 if the username or email is already taken.
    """
    try:
        user = register_user(
            db,
            username=body.username,
            email=body.email,
            password=body.password,
            display_name=body.display_name,
        )
    except UserConflictError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return AuthResponse(
        token=create_access_token(user, settings),
        user=UserResponse.model_validate(user),
        message="User registered successfully",
    )


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: DbSession, settings: AppSettings) -> AuthResponse:
    """
    Authenticate with username (or email) and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        user = authenticate(db, body.username, body.password)
    except ValueError as e:
        # Stored hash is not a bcrypt hash.
        logger.error("Corrupt password hash for login %r", body.username)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed",
        ) from e
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthResponse(
        token=create_access_token(user, settings),
        user=UserResponse.model_validate(user),
        message="Login successful",
    )


@router.get("/profile", response_model=UserResponse)
def profile(principal: AuthenticatedPrincipal, db: DbSession) -> UserResponse:
    """Current user, read from the database."""
    try:
        user = get_user(db, get_user_id(principal))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return UserResponse.model_validate(user)


@router.get("/token-info", response_model=TokenInfoResponse)
def token_info(principal: AuthenticatedPrincipal) -> TokenInfoResponse:
    """Claims of this request; the role reflects the database, not the token."""
    return TokenInfoResponse(
        user_id=get_user_id(principal),
        username=get_username(principal),
        email=get_email(principal),
        security_stamp=get_security_stamp(principal),
        is_admin=is_admin(principal),
        has_user_role=has_role(principal, Role.USER),
        has_admin_role=has_role(principal, Role.ADMIN),
    )


@router.post("/revoke-token", response_model=RevokeTokenResponse)
def revoke_token(principal: AdminPrincipal, db: DbSession) -> RevokeTokenResponse:
    """Invalidate every token of the calling admin, including the one used for this request."""
    try:
        user = revoke_tokens(db, get_user_id(principal))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return RevokeTokenResponse(message="Tokens revoked for user.", user_id=user.id)
