"""Database engine and session management (SQLite or PostgreSQL)."""

from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_sqlite_memory(url: str) -> bool:
    return _is_sqlite(url) and (url.rstrip("/").endswith(":") or ":memory:" in url)


def make_engine(url: str, command_timeout: int | None = None, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL with driver-specific options.

    In-memory SQLite shares one connection across threads so every session sees the same data.
    """
    timeout = command_timeout or settings.DB_COMMAND_TIMEOUT_SEC
    kwargs: dict[str, Any] = {"echo": echo}
    if _is_sqlite(url):
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": timeout}
        if _is_sqlite_memory(url):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
        kwargs["connect_args"] = {"options": f"-c statement_timeout={timeout * 1000}"}
    return create_engine(url, **kwargs)


engine = make_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine) -> None:
    """Create missing tables for all models."""
    from app.models import Base

    Base.metadata.create_all(bind=bind)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's session factory and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
