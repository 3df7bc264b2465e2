"""Account lifecycle: registration, login, updates, token revocation, deletion."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password, verify_password_dummy
from app.models.user import Role, User, new_security_stamp
from app.repositories.users import UserRepository

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base error for account operations."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserConflictError(UserServiceError):
    """Username or email already belongs to another account."""


class UserNotFoundError(UserServiceError):
    """Referenced account does not exist."""


def _ensure_unique(
    repo: UserRepository,
    username: str | None,
    email: str | None,
    exclude_id: int | None = None,
) -> None:
    if repo.find_conflict(username, email, exclude_id=exclude_id) is not None:
        raise UserConflictError("Username or email already exists")


def create_user(
    session: Session,
    username: str,
    email: str,
    password: str,
    display_name: str | None = None,
    role: Role = Role.USER,
) -> User:
    """
    Create an account with a hashed password and a fresh security stamp.
    Raises UserConflictError if username or email is taken; nothing is written then.
    """
    repo = UserRepository(session)
    username = username.strip()
    email = email.strip()
    _ensure_unique(repo, username, email)
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        display_name=(display_name or username).strip(),
        role=role.value,
        security_stamp=new_security_stamp(),
    )
    try:
        user = repo.add(user)
    except IntegrityError as e:
        raise UserConflictError("Username or email already exists") from e
    logger.info("Created user %s (id=%s, role=%s)", user.username, user.id, user.role)
    return user


def register_user(
    session: Session,
    username: str,
    email: str,
    password: str,
    display_name: str | None = None,
) -> User:
    """Self-service registration; always role User."""
    return create_user(session, username, email, password, display_name, Role.USER)


def authenticate(session: Session, login: str, password: str) -> User | None:
    """
    Return the user for username-or-email and password, or None.

    Unknown logins still run one bcrypt check so timing does not reveal which accounts exist.
    """
    user = UserRepository(session).get_by_username_or_email(login.strip())
    if user is None:
        verify_password_dummy(password)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user(session: Session, user_id: int) -> User:
    user = UserRepository(session).get_by_id(user_id)
    if user is None:
        raise UserNotFoundError("User not found")
    return user


def list_users(session: Session) -> list[User]:
    return UserRepository(session).get_all()


def update_user(
    session: Session,
    user_id: int,
    *,
    username: str | None = None,
    email: str | None = None,
    password: str | None = None,
    display_name: str | None = None,
    role: Role | None = None,
) -> User:
    """
    Apply the given changes. The security stamp is rotated when credentials
    (username, email, password) or role change, which logs the user out everywhere.
    """
    repo = UserRepository(session)
    user = get_user(session, user_id)
    new_username = username.strip() if username is not None else None
    new_email = email.strip() if email is not None else None
    if new_username == user.username:
        new_username = None
    if new_email == user.email:
        new_email = None
    _ensure_unique(repo, new_username, new_email, exclude_id=user.id)

    rotate = False
    if new_username is not None:
        user.username = new_username
        rotate = True
    if new_email is not None:
        user.email = new_email
        rotate = True
    if password is not None:
        user.password_hash = hash_password(password)
        rotate = True
    if role is not None and role.value != user.role:
        logger.info("Changing role of user %s from %s to %s", user.id, user.role, role.value)
        user.role = role.value
        rotate = True
    if display_name is not None:
        user.display_name = display_name.strip()
    if rotate:
        user.refresh_security_stamp()
    try:
        return repo.update(user)
    except IntegrityError as e:
        raise UserConflictError("Username or email already exists") from e


def revoke_tokens(session: Session, user_id: int) -> User:
    """Rotate the security stamp unconditionally, invalidating every issued token."""
    user = get_user(session, user_id)
    user.refresh_security_stamp()
    user = UserRepository(session).update(user)
    logger.info("Revoked all tokens for user %s", user.id)
    return user


def delete_user(session: Session, user_id: int) -> None:
    if not UserRepository(session).delete(user_id):
        raise UserNotFoundError("User not found")
    logger.info("Deleted user %s", user_id)
