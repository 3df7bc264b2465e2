"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.config import Settings, get_settings

if TYPE_CHECKING:
    from app.models.user import User

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for input validation; column sizes bound the upper limits.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
EMAIL_MAX_LEN = 100
DISPLAY_NAME_MAX_LEN = 100
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# Claim names written into access tokens.
CLAIM_USER_ID = "sub"
CLAIM_USERNAME = "unique_name"
CLAIM_EMAIL = "email"
CLAIM_SECURITY_STAMP = "security_stamp"
CLAIM_NAME_ID = "nameid"
CLAIM_ROLE = "role"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    Returns False on mismatch. Raises ValueError if the stored hash is not a
    bcrypt hash, which means the row is corrupt.
    """
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))


# Used when the login name is unknown so the response takes as long as a real check.
_DUMMY_HASH = hash_password("coreapi-timing-equalization")


def verify_password_dummy(plain_password: str) -> None:
    verify_password(plain_password, _DUMMY_HASH)


def create_access_token(user: "User", settings: Settings | None = None) -> str:
    """
    Create a signed JWT for the user: id, username, email and security stamp.

    Role is not included; it is read from the database on every request.
    """
    settings = settings or get_settings()
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        CLAIM_USER_ID: str(user.id),
        CLAIM_USERNAME: user.username,
        CLAIM_EMAIL: user.email,
        CLAIM_SECURITY_STAMP: user.security_stamp,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "nbf": now,
        "exp": expire,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Decode and validate JWT signature, issuer, audience and expiry; return the payload.
    Raises jwt.PyJWTError on invalid or expired token.
    """
    settings = settings or get_settings()
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        issuer=settings.JWT_ISSUER,
        audience=settings.JWT_AUDIENCE,
        options={"require": ["exp", "sub"]},
    )
