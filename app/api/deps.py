"""Auth dependencies: authenticated principal, named policies, ownership checks."""

import enum
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.claims import ClaimsPrincipal, get_user_id, has_role, is_admin
from app.core.config import Settings
from app.core.database import get_db
from app.models.user import Role


class Policy(str, enum.Enum):
    """Named authorization rules evaluated against the role claim."""

    ADMIN_ONLY = "AdminOnly"
    USER_OR_ADMIN = "UserOrAdmin"


POLICY_ROLES: dict[Policy, tuple[Role, ...]] = {
    Policy.ADMIN_ONLY: (Role.ADMIN,),
    Policy.USER_OR_ADMIN: (Role.USER, Role.ADMIN),
}


def get_principal(request: Request) -> ClaimsPrincipal:
    """Dependency: require an authenticated principal. Raises 401 if missing, invalid or revoked."""
    principal = getattr(request.state, "principal", None)
    if principal is None or not principal.is_authenticated or get_user_id(principal) <= 0:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def satisfies_policy(principal: ClaimsPrincipal, policy: Policy) -> bool:
    return any(has_role(principal, role) for role in POLICY_ROLES[policy])


def require_policy(policy: Policy) -> Callable[[ClaimsPrincipal], ClaimsPrincipal]:
    """Dependency factory: authenticated principal that satisfies the policy, else 403."""

    def _check(
        principal: Annotated[ClaimsPrincipal, Depends(get_principal)],
    ) -> ClaimsPrincipal:
        if not satisfies_policy(principal, policy):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied by policy {policy.value}",
            )
        return principal

    return _check


def ensure_owner_or_admin(principal: ClaimsPrincipal, user_id: int) -> None:
    """Raise 403 unless the principal is the user being accessed or an admin."""
    if is_admin(principal):
        return
    if get_user_id(principal) != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own data",
        )


AdminPrincipal = Annotated[ClaimsPrincipal, Depends(require_policy(Policy.ADMIN_ONLY))]
UserOrAdminPrincipal = Annotated[ClaimsPrincipal, Depends(require_policy(Policy.USER_OR_ADMIN))]
AuthenticatedPrincipal = Annotated[ClaimsPrincipal, Depends(get_principal)]


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]
DbSession = Annotated[Session, Depends(get_db)]
