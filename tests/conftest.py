"""Test environment: required settings must exist before any app module is imported."""

import os

os.environ.setdefault("JWT_SECRET", "test-signing-secret-with-at-least-32-characters")
os.environ.setdefault("JWT_ISSUER", "https://coreapi.test")
os.environ.setdefault("JWT_AUDIENCE", "https://coreapi.test/clients")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "dev")
