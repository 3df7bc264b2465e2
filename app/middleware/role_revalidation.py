"""Replace the role claim of authenticated requests with the role currently stored in the database."""

import logging
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.claims import get_user_id
from app.middleware.common import (
    get_request_principal,
    internal_error,
    load_user,
    unauthorized,
)

logger = logging.getLogger(__name__)


class RoleRevalidationMiddleware(BaseHTTPMiddleware):
    """
    Runs after token validation and before any policy check.

    Tokens carry no trustworthy role: a demoted user's old token would still
    say Admin. On every authenticated request the user row is loaded and the
    principal is rebuilt with exactly one role claim, taken from the row.

    - no usable user id in the token: pass through unchanged
    - user row missing: 401
    - any lookup failure: 500
    """

    async def dispatch(self, request: Request, call_next: Any) -> Any:
        principal = get_request_principal(request)
        if principal is None:
            return await call_next(request)

        user_id = get_user_id(principal)
        if user_id <= 0:
            return await call_next(request)

        try:
            user = await load_user(request, user_id)
        except Exception:
            logger.exception("Error fetching user %s for role validation", user_id)
            return internal_error("Internal server error during role validation")

        if user is None:
            logger.warning("User %s not found in database", user_id)
            return unauthorized("User not found")

        request.state.principal = principal.with_role(user.role)
        logger.debug("Role for user %s set to %s from database", user_id, user.role)
        return await call_next(request)
