"""Helpers shared by the revalidation middleware."""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.core.claims import ClaimsPrincipal
from app.models.user import User
from app.repositories.users import UserRepository


def get_request_principal(request: Request) -> ClaimsPrincipal | None:
    """The authenticated principal set by JWTAuthenticationMiddleware, or None."""
    principal = getattr(request.state, "principal", None)
    if principal is None or not principal.is_authenticated:
        return None
    return principal


def unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


def internal_error(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail},
    )


def _lookup_user(session_factory, user_id: int) -> User | None:
    db = session_factory()
    try:
        user = UserRepository(db).get_by_id(user_id)
        if user is not None:
            db.expunge(user)
        return user
    finally:
        db.close()


async def load_user(request: Request, user_id: int) -> User | None:
    """
    Load the current user row in the threadpool with a short-lived session.
    Raises SQLAlchemyError on storage failure.
    """
    session_factory = request.app.state.session_factory
    return await run_in_threadpool(_lookup_user, session_factory, user_id)
