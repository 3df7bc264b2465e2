"""Health check endpoints: overall status, configuration checks, filtering by tag."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request, Response, status

from app.api.deps import AppSettings
from app.schemas.health import (
    DetailedHealthResponse,
    HealthCheckDetail,
    HealthResponse,
    HealthTagsResponse,
)
from app.services.health import (
    HEALTH_CHECKS,
    HEALTHY,
    TAG_CONFIG,
    HealthReport,
    available_tags,
    run_health_checks,
)

router = APIRouter()


def _status_code(report: HealthReport) -> int:
    return status.HTTP_200_OK if report.status == HEALTHY else status.HTTP_503_SERVICE_UNAVAILABLE


def _detailed(report: HealthReport, environment: str, tag: str | None) -> DetailedHealthResponse:
    return DetailedHealthResponse(
        status=report.status,
        environment=environment,
        duration_ms=report.duration_ms,
        timestamp=datetime.now(UTC),
        filtered_by_tag=tag,
        checks={
            name: HealthCheckDetail(
                status=result.status,
                description=result.description,
                duration_ms=result.duration_ms,
                data=result.data,
                tags=list(result.tags),
            )
            for name, result in report.entries.items()
        },
    )


@router.get("", response_model=HealthResponse)
def get_health(request: Request, response: Response, settings: AppSettings) -> HealthResponse:
    """
    Return overall service health: 200 when every check passes, 503 otherwise.
    Used by load balancers and monitoring.
    """
    report = run_health_checks(settings, request.app.state.session_factory)
    response.status_code = _status_code(report)
    return HealthResponse(
        status=report.status,
        environment=settings.APP_ENV,
        duration_ms=report.duration_ms,
        timestamp=datetime.now(UTC),
    )


@router.get("/config", response_model=DetailedHealthResponse)
def get_config_health(
    request: Request, response: Response, settings: AppSettings
) -> DetailedHealthResponse:
    """Configuration checks with masked settings summaries."""
    report = run_health_checks(settings, request.app.state.session_factory, tag=TAG_CONFIG)
    response.status_code = _status_code(report)
    return _detailed(report, settings.APP_ENV, TAG_CONFIG)


@router.get("/tags", response_model=HealthTagsResponse)
def get_health_tags() -> HealthTagsResponse:
    return HealthTagsResponse(
        tags=available_tags(),
        total_checks=len(HEALTH_CHECKS),
        timestamp=datetime.now(UTC),
    )


@router.get("/tag/{tag}", response_model=DetailedHealthResponse)
def get_health_by_tag(
    tag: str, request: Request, response: Response, settings: AppSettings
) -> DetailedHealthResponse:
    """Run only the checks carrying `tag`. An unknown tag runs nothing and is Healthy."""
    report = run_health_checks(settings, request.app.state.session_factory, tag=tag)
    response.status_code = _status_code(report)
    return _detailed(report, settings.APP_ENV, tag)
