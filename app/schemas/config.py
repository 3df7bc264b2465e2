"""Schemas for the masked configuration endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ConfigSectionResponse(BaseModel):
    section: str
    config: dict[str, Any]


class ConfigSummaryResponse(BaseModel):
    environment: str
    jwt: dict[str, Any]
    database: dict[str, Any]
    cors: dict[str, Any]
    timestamp: datetime


class SectionValidation(BaseModel):
    valid: bool
    errors: list[str]


class ConfigValidationResponse(BaseModel):
    message: str
    all_valid: bool
    results: dict[str, SectionValidation]
    timestamp: datetime
