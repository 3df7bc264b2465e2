"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Any, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "sqlite+pysqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

# HS256 needs a key of at least 256 bits.
JWT_SECRET_MIN_LEN = 32
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
# Local time with its real UTC offset.
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Field names containing any of these are masked in configuration summaries.
SENSITIVE_KEYWORDS = ("secret", "key", "password", "token", "connection", "database_url")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # SQLite by default; PostgreSQL is accepted for deployments.
    DATABASE_URL: str = "sqlite:///./coreapi.db"
    DB_COMMAND_TIMEOUT_SEC: int = 30
    # Create missing tables on startup (no migrations).
    DB_AUTO_CREATE: bool = True

    # JWT authentication: no defaults for secret/issuer/audience, startup fails without them.
    JWT_SECRET: SecretStr
    JWT_ISSUER: str
    JWT_AUDIENCE: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # CORS
    CORS_ALLOWED_ORIGINS: list[str] = ["*"]
    CORS_ALLOWED_METHODS: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    CORS_ALLOWED_HEADERS: list[str] = ["*"]
    # Credentials with a wildcard origin is reported unhealthy by the config health check.
    CORS_ALLOW_CREDENTIALS: bool = False
    CORS_PREFLIGHT_MAX_AGE: int = 3600

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.strip().startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:/// or postgresql://)"
            )
        return v.strip()

    @field_validator("DB_COMMAND_TIMEOUT_SEC")
    @classmethod
    def validate_db_command_timeout(cls, v: int) -> int:
        if v < 1 or v > 300:
            raise ValueError("DB_COMMAND_TIMEOUT_SEC must be between 1 and 300")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        secret = v.get_secret_value().strip()
        if not secret:
            raise ValueError("JWT_SECRET must be set and non-empty")
        if len(secret) < JWT_SECRET_MIN_LEN:
            raise ValueError(
                f"JWT_SECRET must be at least {JWT_SECRET_MIN_LEN} characters"
            )
        return SecretStr(secret)

    @field_validator("JWT_ISSUER", "JWT_AUDIENCE")
    @classmethod
    def validate_jwt_uri(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT issuer and audience must be set and non-empty")
        s = v.strip().lower()
        if not (s.startswith("http://") or s.startswith("https://")):
            raise ValueError(
                "JWT issuer and audience must be http or https URLs (e.g. https://api.example.com)"
            )
        return v.strip()

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        algorithm = v.strip().upper()
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(
                f"JWT_ALGORITHM must be an HMAC algorithm ({', '.join(HMAC_ALGORITHMS)})"
            )
        return algorithm

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("CORS_ALLOWED_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        origins = [o.strip() for o in v if o and o.strip()]
        if not origins:
            raise ValueError("CORS_ALLOWED_ORIGINS must contain at least one origin")
        return origins

    @field_validator("CORS_PREFLIGHT_MAX_AGE")
    @classmethod
    def validate_cors_preflight_max_age(cls, v: int) -> int:
        if v < 0:
            raise ValueError("CORS_PREFLIGHT_MAX_AGE must be >= 0")
        return v


def is_sensitive_field(name: str) -> bool:
    """True if a settings field holds a secret and must not be echoed back."""
    lowered = name.lower()
    return any(keyword in lowered for keyword in SENSITIVE_KEYWORDS)


def summarize_settings(settings: Settings, fields: tuple[str, ...]) -> dict[str, Any]:
    """
    Return {field: value} for the given settings fields with sensitive values masked.
    Used by health checks and the config endpoints.
    """
    summary: dict[str, Any] = {}
    for name in fields:
        value = getattr(settings, name, None)
        if is_sensitive_field(name):
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            summary[name] = "***CONFIGURED***" if value else "***NOT SET***"
        else:
            summary[name] = value
    return summary


JWT_FIELDS = ("JWT_SECRET", "JWT_ISSUER", "JWT_AUDIENCE", "JWT_ALGORITHM", "JWT_EXPIRE_MINUTES")
DATABASE_FIELDS = ("DATABASE_URL", "DB_COMMAND_TIMEOUT_SEC", "DB_AUTO_CREATE")
CORS_FIELDS = (
    "CORS_ALLOWED_ORIGINS",
    "CORS_ALLOWED_METHODS",
    "CORS_ALLOWED_HEADERS",
    "CORS_ALLOW_CREDENTIALS",
    "CORS_PREFLIGHT_MAX_AGE",
)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
