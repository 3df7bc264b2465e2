"""User-specific lookups on top of the generic repository."""

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import User
from app.repositories.base import Repository


class UserRepository(Repository[User]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, User)

    def get_by_username_or_email(self, login: str) -> User | None:
        """Find a user whose username or email equals the login string."""
        return (
            self.session.query(User)
            .filter(or_(User.username == login, User.email == login))
            .first()
        )

    def find_conflict(
        self,
        username: str | None,
        email: str | None,
        exclude_id: int | None = None,
    ) -> User | None:
        """Return an existing user holding the given username or email, if any."""
        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)
        if not conditions:
            return None
        query = self.session.query(User).filter(or_(*conditions))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first()
