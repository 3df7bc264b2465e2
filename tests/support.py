"""Shared helpers for API tests: isolated app per test with an in-memory database."""

import unittest
from typing import Any

from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import make_engine
from app.main import create_app
from app.models.user import Role, User

TEST_SECRET = "test-signing-secret-with-at-least-32-characters"
TEST_ISSUER = "https://coreapi.test"
TEST_AUDIENCE = "https://coreapi.test/clients"
API = "/api/v1"


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "JWT_SECRET": TEST_SECRET,
        "JWT_ISSUER": TEST_ISSUER,
        "JWT_AUDIENCE": TEST_AUDIENCE,
        "DATABASE_URL": "sqlite://",
        "CORS_ALLOW_CREDENTIALS": False,
    }
    values.update(overrides)
    return Settings(**values)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    """Fresh app, database and client for every test."""

    def setUp(self) -> None:
        self.settings = make_settings()
        self.engine = make_engine("sqlite://")
        self.app = create_app(self.settings, self.engine)
        self.session_factory = self.app.state.session_factory
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()
        self.engine.dispose()

    def register(
        self,
        username: str,
        email: str | None = None,
        password: str = "password123",
    ) -> dict[str, Any]:
        resp = self.client.post(
            f"{API}/auth/register",
            json={"username": username, "email": email or f"{username}@x.com", "password": password},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()

    def login(self, username: str, password: str = "password123") -> str:
        resp = self.client.post(
            f"{API}/auth/login", json={"username": username, "password": password}
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["token"]

    def set_role_in_db(self, user_id: int, role: Role) -> None:
        """Change the stored role directly, without rotating the security stamp."""
        db = self.session_factory()
        try:
            user = db.get(User, user_id)
            user.role = role.value
            db.commit()
        finally:
            db.close()

    def get_user_row(self, user_id: int) -> User | None:
        db = self.session_factory()
        try:
            user = db.get(User, user_id)
            if user is not None:
                db.expunge(user)
            return user
        finally:
            db.close()

    def count_users(self) -> int:
        db = self.session_factory()
        try:
            return db.query(User).count()
        finally:
            db.close()

    def register_admin(self, username: str = "admin") -> tuple[str, int]:
        """Register a user and promote it in the database; the returned token stays valid."""
        body = self.register(username)
        self.set_role_in_db(body["user"]["id"], Role.ADMIN)
        return body["token"], body["user"]["id"]
