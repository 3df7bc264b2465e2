"""Pydantic schemas for health check responses."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

HealthStatus = Literal["Healthy", "Unhealthy"]


class HealthCheckDetail(BaseModel):
    """Result of one named check."""

    status: HealthStatus
    description: str
    duration_ms: float
    data: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response body for the overall health endpoint."""

    status: HealthStatus = Field(description="Healthy only if every check passed")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    duration_ms: float
    timestamp: datetime


class DetailedHealthResponse(HealthResponse):
    """Health response with the individual check results, optionally filtered by tag."""

    filtered_by_tag: str | None = None
    checks: dict[str, HealthCheckDetail] = Field(default_factory=dict)


class HealthTagsResponse(BaseModel):
    tags: list[str]
    total_checks: int
    timestamp: datetime
