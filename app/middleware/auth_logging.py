"""Log one line per authenticated request."""

import logging
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.claims import get_user_id, get_username
from app.middleware.common import get_request_principal

logger = logging.getLogger(__name__)


class AuthLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Any) -> Any:
        principal = get_request_principal(request)
        if principal is not None:
            logger.info(
                "Authenticated request from user %s (id=%s) to %s %s",
                get_username(principal),
                get_user_id(principal),
                request.method,
                request.url.path,
            )
        return await call_next(request)
