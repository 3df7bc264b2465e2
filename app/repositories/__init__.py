"""Storage access: one generic repository plus entity-specific queries."""

from app.repositories.base import Repository
from app.repositories.users import UserRepository

__all__ = ["Repository", "UserRepository"]
