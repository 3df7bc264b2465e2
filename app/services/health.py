"""
Health checks: configuration sanity (jwt, database, cors) and database connectivity.

Each check is tagged so callers can run a subset (e.g. only "config" checks).
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import (
    CORS_FIELDS,
    DATABASE_FIELDS,
    JWT_FIELDS,
    JWT_SECRET_MIN_LEN,
    Settings,
    summarize_settings,
)
from app.core.database import check_db_connected

logger = logging.getLogger(__name__)

HEALTHY = "Healthy"
UNHEALTHY = "Unhealthy"

TAG_CONFIG = "config"
TAG_DATABASE = "database"


@dataclass
class CheckResult:
    status: str
    description: str
    data: dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0
    tags: tuple[str, ...] = ()


@dataclass
class HealthReport:
    status: str
    duration_ms: float
    entries: dict[str, CheckResult]


@dataclass(frozen=True)
class HealthCheck:
    name: str
    tags: tuple[str, ...]
    run: Callable[[Settings, sessionmaker[Session]], CheckResult]


def section_errors(settings: Settings, fields: tuple[str, ...]) -> list[str]:
    """Re-validate the given settings fields and return human-readable errors (empty if valid)."""
    values = {name: getattr(settings, name) for name in Settings.model_fields}
    try:
        Settings.model_validate(values)
    except ValidationError as e:
        return [
            f"{err['loc'][0]}: {err['msg']}"
            for err in e.errors()
            if err["loc"] and err["loc"][0] in fields
        ]
    return []


def _result(errors: list[str], ok_description: str, data: dict[str, Any]) -> CheckResult:
    if errors:
        return CheckResult(UNHEALTHY, "; ".join(errors), data)
    return CheckResult(HEALTHY, ok_description, data)


def check_jwt_config(settings: Settings, _factory: sessionmaker[Session]) -> CheckResult:
    errors = section_errors(settings, JWT_FIELDS)
    if len(settings.JWT_SECRET.get_secret_value()) < JWT_SECRET_MIN_LEN:
        errors.append(f"JWT_SECRET too short (minimum {JWT_SECRET_MIN_LEN} characters)")
    data = summarize_settings(settings, JWT_FIELDS)
    data["valid"] = not errors
    return _result(errors, "JWT settings are valid", data)


def check_database_config(settings: Settings, _factory: sessionmaker[Session]) -> CheckResult:
    errors = section_errors(settings, DATABASE_FIELDS)
    data = summarize_settings(settings, DATABASE_FIELDS)
    data["valid"] = not errors
    return _result(errors, "Database settings are valid", data)


def check_cors_config(settings: Settings, _factory: sessionmaker[Session]) -> CheckResult:
    errors = section_errors(settings, CORS_FIELDS)
    if "*" in settings.CORS_ALLOWED_ORIGINS and settings.CORS_ALLOW_CREDENTIALS:
        errors.append("Insecure CORS: CORS_ALLOW_CREDENTIALS=true with wildcard origin")
    data = summarize_settings(settings, CORS_FIELDS)
    data["valid"] = not errors
    return _result(errors, "CORS settings are valid", data)


def check_database_connection(settings: Settings, factory: sessionmaker[Session]) -> CheckResult:
    db = factory()
    try:
        connected = check_db_connected(db)
    finally:
        db.close()
    if connected:
        return CheckResult(HEALTHY, "Database is reachable", {"database": "connected"})
    return CheckResult(UNHEALTHY, "Database is not reachable", {"database": "disconnected"})


HEALTH_CHECKS: tuple[HealthCheck, ...] = (
    HealthCheck("jwt", (TAG_CONFIG,), check_jwt_config),
    HealthCheck("database_config", (TAG_CONFIG, TAG_DATABASE), check_database_config),
    HealthCheck("cors", (TAG_CONFIG,), check_cors_config),
    HealthCheck("database", (TAG_DATABASE,), check_database_connection),
)


def available_tags(checks: tuple[HealthCheck, ...] = HEALTH_CHECKS) -> list[str]:
    return sorted({tag for check in checks for tag in check.tags})


def run_health_checks(
    settings: Settings,
    session_factory: sessionmaker[Session],
    tag: str | None = None,
    checks: tuple[HealthCheck, ...] = HEALTH_CHECKS,
) -> HealthReport:
    """
    Run all checks (or those carrying `tag`). A check that raises is reported
    Unhealthy with the exception message; the report is Healthy only if every entry is.
    """
    started = time.perf_counter()
    entries: dict[str, CheckResult] = {}
    for check in checks:
        if tag is not None and tag not in check.tags:
            continue
        check_started = time.perf_counter()
        try:
            result = check.run(settings, session_factory)
        except Exception as e:
            logger.exception("Health check %s failed unexpectedly", check.name)
            result = CheckResult(UNHEALTHY, f"Unexpected error: {e}")
        result.duration_ms = (time.perf_counter() - check_started) * 1000
        result.tags = check.tags
        if result.status != HEALTHY:
            logger.error("Health check %s unhealthy: %s", check.name, result.description)
        entries[check.name] = result

    status = HEALTHY if all(r.status == HEALTHY for r in entries.values()) else UNHEALTHY
    return HealthReport(
        status=status,
        duration_ms=(time.perf_counter() - started) * 1000,
        entries=entries,
    )
