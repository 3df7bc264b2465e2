"""Read-only view of the running configuration with secrets masked (admin only)."""

from datetime import UTC, datetime

from fastapi import APIRouter

from app.api.deps import AdminPrincipal, AppSettings
from app.core.config import CORS_FIELDS, DATABASE_FIELDS, JWT_FIELDS, summarize_settings
from app.schemas.config import (
    ConfigSectionResponse,
    ConfigSummaryResponse,
    ConfigValidationResponse,
    SectionValidation,
)
from app.services.health import section_errors

router = APIRouter()

SECTIONS = {"jwt": JWT_FIELDS, "database": DATABASE_FIELDS, "cors": CORS_FIELDS}


@router.get("/jwt", response_model=ConfigSectionResponse)
def get_jwt_config(_admin: AdminPrincipal, settings: AppSettings) -> ConfigSectionResponse:
    return ConfigSectionResponse(section="jwt", config=summarize_settings(settings, JWT_FIELDS))


@router.get("/database", response_model=ConfigSectionResponse)
def get_database_config(_admin: AdminPrincipal, settings: AppSettings) -> ConfigSectionResponse:
    return ConfigSectionResponse(
        section="database", config=summarize_settings(settings, DATABASE_FIELDS)
    )


@router.get("/cors", response_model=ConfigSectionResponse)
def get_cors_config(_admin: AdminPrincipal, settings: AppSettings) -> ConfigSectionResponse:
    return ConfigSectionResponse(section="cors", config=summarize_settings(settings, CORS_FIELDS))


@router.get("/all", response_model=ConfigSummaryResponse)
def get_all_config(_admin: AdminPrincipal, settings: AppSettings) -> ConfigSummaryResponse:
    return ConfigSummaryResponse(
        environment=settings.APP_ENV,
        jwt=summarize_settings(settings, JWT_FIELDS),
        database=summarize_settings(settings, DATABASE_FIELDS),
        cors=summarize_settings(settings, CORS_FIELDS),
        timestamp=datetime.now(UTC),
    )


@router.get("/validate", response_model=ConfigValidationResponse)
def validate_config(_admin: AdminPrincipal, settings: AppSettings) -> ConfigValidationResponse:
    """Re-run settings validation on demand and report errors per section."""
    results = {}
    for section, fields in SECTIONS.items():
        errors = section_errors(settings, fields)
        results[section] = SectionValidation(valid=not errors, errors=errors)
    all_valid = all(r.valid for r in results.values())
    return ConfigValidationResponse(
        message="All settings are valid" if all_valid else "Some settings are invalid",
        all_valid=all_valid,
        results=results,
        timestamp=datetime.now(UTC),
    )
