"""Reject tokens whose security stamp no longer matches the user's current stamp."""

import logging
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.claims import get_security_stamp, get_user_id
from app.middleware.common import (
    get_request_principal,
    internal_error,
    load_user,
    unauthorized,
)

logger = logging.getLogger(__name__)

TOKEN_INVALIDATED_DETAIL = "Token has been invalidated. Please login again."


class SecurityStampValidationMiddleware(BaseHTTPMiddleware):
    """
    Token revocation without a deny-list: rotating a user's security_stamp
    invalidates every token issued before the rotation.

    Tokens without a user id or stamp claim are accepted as legacy tokens.
    """

    async def dispatch(self, request: Request, call_next: Any) -> Any:
        principal = get_request_principal(request)
        if principal is None:
            return await call_next(request)

        user_id = get_user_id(principal)
        token_stamp = get_security_stamp(principal)
        if user_id <= 0 or not token_stamp:
            return await call_next(request)

        try:
            user = await load_user(request, user_id)
        except Exception:
            logger.exception("Error validating security stamp for user %s", user_id)
            return internal_error("Internal server error during token validation")

        if user is None:
            logger.warning("User %s not found in database", user_id)
            return unauthorized("User not found")

        if user.security_stamp != token_stamp:
            logger.warning("Security stamp mismatch for user %s; token rejected", user_id)
            return unauthorized(TOKEN_INVALIDATED_DETAIL)

        logger.debug("Security stamp validation passed for user %s", user_id)
        return await call_next(request)
