"""User CRUD. Listing, creation, deletion and revocation are admin only; read and update allow the owner."""

from fastapi import APIRouter, HTTPException, Response, status

from app.api.deps import AdminPrincipal, DbSession, UserOrAdminPrincipal, ensure_owner_or_admin
from app.core.claims import is_admin
from app.schemas.auth import RevokeTokenResponse
from app.schemas.user import UserCreate, UserResponse, UsersListResponse, UserUpdate
from app.services.users import (
    UserConflictError,
    UserNotFoundError,
    create_user,
    delete_user,
    get_user,
    list_users,
    revoke_tokens,
    update_user,
)

router = APIRouter()


def _not_found(e: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


def _conflict(e: UserConflictError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("", response_model=UsersListResponse)
def get_users(_admin: AdminPrincipal, db: DbSession) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=[UserResponse.model_validate(u) for u in list_users(db)])


@router.get("/{user_id}", response_model=UserResponse)
def get_user_by_id(user_id: int, principal: UserOrAdminPrincipal, db: DbSession) -> UserResponse:
    ensure_owner_or_admin(principal, user_id)
    try:
        return UserResponse.model_validate(get_user(db, user_id))
    except UserNotFoundError as e:
        raise _not_found(e) from e


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def post_user(body: UserCreate, _admin: AdminPrincipal, db: DbSession) -> UserResponse:
    """Create a user with any role (admin only)."""
    try:
        user = create_user(
            db,
            username=body.username,
            email=body.email,
            password=body.password,
            display_name=body.display_name,
            role=body.role,
        )
    except UserConflictError as e:
        raise _conflict(e) from e
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def put_user(
    user_id: int,
    body: UserUpdate,
    principal: UserOrAdminPrincipal,
    db: DbSession,
) -> UserResponse:
    """
    Update a user. Owners may change their own profile and credentials; only
    admins may change a role. Credential or role changes revoke existing tokens.
    """
    ensure_owner_or_admin(principal, user_id)
    if body.role is not None and not is_admin(principal):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can change roles",
        )
    try:
        user = update_user(
            db,
            user_id,
            username=body.username,
            email=body.email,
            password=body.password,
            display_name=body.display_name,
            role=body.role,
        )
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except UserConflictError as e:
        raise _conflict(e) from e
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(user_id: int, _admin: AdminPrincipal, db: DbSession) -> Response:
    try:
        delete_user(db, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/revoke-tokens", response_model=RevokeTokenResponse)
def revoke_user_tokens(user_id: int, _admin: AdminPrincipal, db: DbSession) -> RevokeTokenResponse:
    """Invalidate every token issued to the given user (admin only)."""
    try:
        user = revoke_tokens(db, user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    return RevokeTokenResponse(message="Tokens revoked for user.", user_id=user.id)
