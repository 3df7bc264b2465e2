"""Bearer token authentication: attach a claims principal to the request when the JWT is valid."""

import logging
from typing import Any

import jwt
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.claims import principal_from_payload
from app.core.config import Settings, get_settings
from app.core.security import decode_access_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Token from an 'Authorization: Bearer <token>' header value, or None."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class JWTAuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Validate signature, issuer, audience and expiry of the bearer token.

    Never rejects by itself: request.state.principal is None for anonymous or
    invalid tokens, and protected routes answer 401 through their dependencies.
    Expired, malformed and wrongly signed tokens all look the same to the caller.
    """

    def __init__(self, app: Any, settings: Settings | None = None) -> None:
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next: Any) -> Any:
        request.state.principal = None
        token = extract_bearer_token(request.headers.get("Authorization"))
        if token:
            try:
                payload = decode_access_token(token, self.settings)
            except jwt.PyJWTError as e:
                logger.debug("Rejected bearer token: %s", type(e).__name__)
            else:
                request.state.principal = principal_from_payload(payload)
        return await call_next(request)
