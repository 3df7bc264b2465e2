"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.api.v1 import router as v1_router
from app.core.config import LOG_DATEFMT, LOG_FORMAT, Settings, settings as default_settings
from app.core.database import engine as default_engine
from app.core.database import init_db
from app.middleware import (
    AuthLoggingMiddleware,
    JWTAuthenticationMiddleware,
    RoleRevalidationMiddleware,
    SecurityStampValidationMiddleware,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


async def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort 500; the exception is logged, never echoed to the client."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """
    Build the application. Tests pass their own settings and engine.

    Middleware runs outermost first: CORS, JWT authentication, role revalidation,
    security stamp validation, auth logging; policies are route dependencies.
    """
    settings = settings or default_settings
    engine = engine or default_engine

    app = FastAPI(
        title="Core API Base",
        version="0.1.0",
        description="CRUD API with JWT login, database-backed roles and token revocation",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    if settings.DB_AUTO_CREATE:
        init_db(engine)

    # add_middleware prepends, so the last one added runs first.
    app.add_middleware(AuthLoggingMiddleware)
    app.add_middleware(SecurityStampValidationMiddleware)
    app.add_middleware(RoleRevalidationMiddleware)
    app.add_middleware(JWTAuthenticationMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOWED_METHODS,
        allow_headers=settings.CORS_ALLOWED_HEADERS,
        max_age=settings.CORS_PREFLIGHT_MAX_AGE,
    )

    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Core API Base", "docs": "/docs"}

    return app


configure_logging(default_settings.LOG_LEVEL)
app = create_app()
