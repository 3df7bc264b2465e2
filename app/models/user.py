"""ORM model for application users (auth and RBAC)."""

import enum
import uuid

from sqlalchemy import Column, Integer, String

from app.models.base import Base


class Role(str, enum.Enum):
    """Roles stored on the user row; the database value is authoritative."""

    USER = "User"
    ADMIN = "Admin"


def new_security_stamp() -> str:
    """Return a fresh opaque stamp (UUID4, 36 chars)."""
    return str(uuid.uuid4())


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    security_stamp is embedded in every issued token; changing it invalidates
    all tokens issued before the change.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(100), nullable=False)
    role = Column(String(32), nullable=False, default=Role.USER.value)
    security_stamp = Column(String(36), nullable=False, default=new_security_stamp)

    def refresh_security_stamp(self) -> None:
        """Rotate the stamp, revoking every token issued with the previous one."""
        self.security_stamp = new_security_stamp()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
