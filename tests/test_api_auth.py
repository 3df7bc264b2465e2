"""Integration tests for /auth routes and the revalidation pipeline against a real database."""

import unittest

from app.core.security import decode_access_token
from app.models.user import Role
from tests.support import API, ApiTestCase, bearer


class TestRegister(ApiTestCase):
    def test_register_returns_token_and_user(self) -> None:
        body = self.register("alice", "alice@x.com")
        self.assertEqual(body["message"], "User registered successfully")
        self.assertEqual(body["user"]["username"], "alice")
        self.assertEqual(body["user"]["email"], "alice@x.com")
        self.assertEqual(body["user"]["display_name"], "alice")
        self.assertEqual(body["user"]["role"], "User")
        self.assertNotIn("password_hash", body["user"])
        payload = decode_access_token(body["token"], self.settings)
        self.assertEqual(payload["sub"], str(body["user"]["id"]))
        self.assertNotIn("role", payload)

    def test_duplicate_username_is_400_and_creates_nothing(self) -> None:
        self.register("alice", "alice@x.com")
        resp = self.client.post(
            f"{API}/auth/register",
            json={"username": "alice", "email": "other@x.com", "password": "password123"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.count_users(), 1)

    def test_duplicate_email_is_400(self) -> None:
        self.register("alice", "alice@x.com")
        resp = self.client.post(
            f"{API}/auth/register",
            json={"username": "alice2", "email": "alice@x.com", "password": "password123"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.count_users(), 1)

    def test_invalid_body_is_422(self) -> None:
        resp = self.client.post(
            f"{API}/auth/register",
            json={"username": "al", "email": "not-an-email", "password": "short"},
        )
        self.assertEqual(resp.status_code, 422)

    def test_malformed_email_domain_is_422(self) -> None:
        resp = self.client.post(
            f"{API}/auth/register",
            json={"username": "alice", "email": "alice@x..com", "password": "password123"},
        )
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(self.count_users(), 0)

    def test_email_domain_is_normalized(self) -> None:
        body = self.register("alice", "Alice@X.COM")
        self.assertEqual(body["user"]["email"], "Alice@x.com")
        self.login("Alice@x.com")


class TestLogin(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.register("alice", "alice@x.com")["user"]

    def test_login_by_username(self) -> None:
        resp = self.client.post(
            f"{API}/auth/login", json={"username": "alice", "password": "password123"}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Login successful")
        self.assertEqual(resp.json()["user"]["id"], self.user["id"])

    def test_login_by_email(self) -> None:
        token = self.login("alice@x.com")
        self.assertEqual(decode_access_token(token, self.settings)["sub"], str(self.user["id"]))

    def test_wrong_password_is_401(self) -> None:
        resp = self.client.post(
            f"{API}/auth/login", json={"username": "alice", "password": "wrong-password"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid credentials")

    def test_unknown_user_is_401(self) -> None:
        resp = self.client.post(
            f"{API}/auth/login", json={"username": "nobody", "password": "password123"}
        )
        self.assertEqual(resp.status_code, 401)


class TestProfileAndTokenInfo(ApiTestCase):
    def test_profile_requires_token(self) -> None:
        self.assertEqual(self.client.get(f"{API}/auth/profile").status_code, 401)

    def test_invalid_token_is_401(self) -> None:
        resp = self.client.get(f"{API}/auth/profile", headers=bearer("garbage"))
        self.assertEqual(resp.status_code, 401)

    def test_profile_returns_current_user(self) -> None:
        body = self.register("bob")
        resp = self.client.get(f"{API}/auth/profile", headers=bearer(body["token"]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["username"], "bob")

    def test_token_info_reflects_database_role(self) -> None:
        body = self.register("bob")
        user_id = body["user"]["id"]
        resp = self.client.get(f"{API}/auth/token-info", headers=bearer(body["token"]))
        info = resp.json()
        self.assertEqual(info["user_id"], user_id)
        self.assertEqual(info["username"], "bob")
        self.assertEqual(info["email"], "bob@x.com")
        self.assertTrue(info["has_user_role"])
        self.assertFalse(info["is_admin"])
        stored = self.get_user_row(user_id)
        self.assertEqual(info["security_stamp"], stored.security_stamp)

        self.set_role_in_db(user_id, Role.ADMIN)
        info = self.client.get(f"{API}/auth/token-info", headers=bearer(body["token"])).json()
        self.assertTrue(info["is_admin"])
        self.assertTrue(info["has_admin_role"])
        self.assertFalse(info["has_user_role"])

    def test_deleted_user_token_is_401(self) -> None:
        admin_token, _ = self.register_admin()
        body = self.register("bob")
        resp = self.client.delete(
            f"{API}/users/{body['user']['id']}", headers=bearer(admin_token)
        )
        self.assertEqual(resp.status_code, 204)
        resp = self.client.get(f"{API}/auth/profile", headers=bearer(body["token"]))
        self.assertEqual(resp.status_code, 401)


class TestRoleRevalidationFlow(ApiTestCase):
    def test_promotion_applies_on_next_request(self) -> None:
        body = self.register("bob")
        headers = bearer(body["token"])
        self.assertEqual(self.client.get(f"{API}/users", headers=headers).status_code, 403)
        self.set_role_in_db(body["user"]["id"], Role.ADMIN)
        self.assertEqual(self.client.get(f"{API}/users", headers=headers).status_code, 200)

    def test_demotion_applies_on_next_request(self) -> None:
        token, user_id = self.register_admin()
        headers = bearer(token)
        self.assertEqual(self.client.get(f"{API}/users", headers=headers).status_code, 200)
        self.set_role_in_db(user_id, Role.USER)
        self.assertEqual(self.client.get(f"{API}/users", headers=headers).status_code, 403)


class TestRevocation(ApiTestCase):
    def test_revoke_token_requires_admin(self) -> None:
        body = self.register("bob")
        resp = self.client.post(f"{API}/auth/revoke-token", headers=bearer(body["token"]))
        self.assertEqual(resp.status_code, 403)

    def test_admin_revokes_own_tokens(self) -> None:
        token, user_id = self.register_admin()
        resp = self.client.post(f"{API}/auth/revoke-token", headers=bearer(token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user_id"], user_id)
        resp = self.client.get(f"{API}/auth/profile", headers=bearer(token))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Token has been invalidated. Please login again.")
        # a fresh login works again
        new_token = self.login("admin")
        self.assertEqual(
            self.client.get(f"{API}/auth/profile", headers=bearer(new_token)).status_code, 200
        )

    def test_password_change_invalidates_old_token(self) -> None:
        body = self.register("bob")
        user_id = body["user"]["id"]
        resp = self.client.put(
            f"{API}/users/{user_id}",
            json={"password": "a-brand-new-password"},
            headers=bearer(body["token"]),
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"{API}/auth/profile", headers=bearer(body["token"]))
        self.assertEqual(resp.status_code, 401)
        self.login("bob", "a-brand-new-password")

    def test_register_login_revoke_scenario(self) -> None:
        registered = self.register("alice", "alice@x.com")
        t1 = registered["token"]
        t2 = self.login("alice")
        p1 = decode_access_token(t1, self.settings)
        p2 = decode_access_token(t2, self.settings)
        self.assertEqual(p1["sub"], p2["sub"])

        for token in (t1, t2):
            resp = self.client.get(f"{API}/auth/profile", headers=bearer(token))
            self.assertEqual(resp.status_code, 200)

        admin_token, _ = self.register_admin("root")
        resp = self.client.post(
            f"{API}/users/{registered['user']['id']}/revoke-tokens",
            headers=bearer(admin_token),
        )
        self.assertEqual(resp.status_code, 200)

        for token in (t1, t2):
            resp = self.client.get(f"{API}/auth/profile", headers=bearer(token))
            self.assertEqual(resp.status_code, 401)
        # the admin's own token is unaffected
        resp = self.client.get(f"{API}/auth/profile", headers=bearer(admin_token))
        self.assertEqual(resp.status_code, 200)


if __name__ == "__main__":
    unittest.main()
