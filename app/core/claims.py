"""
Claims principal attached to authenticated requests, and typed accessors over it.

Accessors return zero values (0, "", False) when a claim is missing; callers
must treat user id 0 as unknown and deny access.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from app.core.security import (
    CLAIM_EMAIL,
    CLAIM_NAME_ID,
    CLAIM_ROLE,
    CLAIM_SECURITY_STAMP,
    CLAIM_USER_ID,
    CLAIM_USERNAME,
)
from app.models.user import Role

AUTHENTICATION_TYPE_BEARER = "Bearer"


@dataclass(frozen=True)
class Claim:
    type: str
    value: str


@dataclass(frozen=True)
class ClaimsPrincipal:
    """Immutable claim set; middleware replaces the principal instead of editing it."""

    claims: tuple[Claim, ...] = field(default_factory=tuple)
    authentication_type: str | None = AUTHENTICATION_TYPE_BEARER

    @property
    def is_authenticated(self) -> bool:
        return bool(self.authentication_type)

    def find_first(self, claim_type: str) -> str | None:
        for claim in self.claims:
            if claim.type == claim_type:
                return claim.value
        return None

    def find_all(self, claim_type: str) -> list[str]:
        return [c.value for c in self.claims if c.type == claim_type]

    def is_in_role(self, role: str) -> bool:
        return role in self.find_all(CLAIM_ROLE)

    def with_role(self, role: str) -> "ClaimsPrincipal":
        """Copy of this principal with every role claim replaced by a single one."""
        kept = tuple(c for c in self.claims if c.type != CLAIM_ROLE)
        return ClaimsPrincipal(
            claims=kept + (Claim(CLAIM_ROLE, role),),
            authentication_type=self.authentication_type,
        )


def principal_from_payload(payload: dict[str, Any]) -> ClaimsPrincipal:
    """Build a principal from a decoded token payload; list values become repeated claims."""
    claims: list[Claim] = []
    for claim_type, value in payload.items():
        values: Iterable[Any] = value if isinstance(value, list | tuple) else (value,)
        for v in values:
            if v is None:
                continue
            claims.append(Claim(claim_type, str(v)))
    return ClaimsPrincipal(claims=tuple(claims))


def get_claim(principal: ClaimsPrincipal | None, claim_type: str) -> str | None:
    if principal is None:
        return None
    return principal.find_first(claim_type)


def get_user_id(principal: ClaimsPrincipal | None) -> int:
    """User id from 'sub' (or 'nameid'); 0 if absent or not an integer."""
    raw = get_claim(principal, CLAIM_USER_ID) or get_claim(principal, CLAIM_NAME_ID) or "0"
    try:
        return int(raw)
    except ValueError:
        return 0


def get_username(principal: ClaimsPrincipal | None) -> str:
    return get_claim(principal, CLAIM_USERNAME) or ""


def get_email(principal: ClaimsPrincipal | None) -> str:
    return get_claim(principal, CLAIM_EMAIL) or ""


def get_security_stamp(principal: ClaimsPrincipal | None) -> str:
    return get_claim(principal, CLAIM_SECURITY_STAMP) or ""


def has_role(principal: ClaimsPrincipal | None, role: str | Role) -> bool:
    if principal is None:
        return False
    name = role.value if isinstance(role, Role) else role
    return principal.is_in_role(name)


def is_admin(principal: ClaimsPrincipal | None) -> bool:
    return has_role(principal, Role.ADMIN)
