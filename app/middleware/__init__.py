"""Request pipeline: token authentication, role revalidation, security stamp check, logging."""

from app.middleware.auth_logging import AuthLoggingMiddleware
from app.middleware.authentication import JWTAuthenticationMiddleware
from app.middleware.role_revalidation import RoleRevalidationMiddleware
from app.middleware.security_stamp import SecurityStampValidationMiddleware

__all__ = [
    "AuthLoggingMiddleware",
    "JWTAuthenticationMiddleware",
    "RoleRevalidationMiddleware",
    "SecurityStampValidationMiddleware",
]
