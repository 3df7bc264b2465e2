"""Unit tests for app.core.claims: principal construction and zero-value accessors."""

import unittest

from app.core.claims import (
    Claim,
    ClaimsPrincipal,
    get_email,
    get_security_stamp,
    get_user_id,
    get_username,
    has_role,
    is_admin,
    principal_from_payload,
)
from app.models.user import Role


def _principal(**claims: object) -> ClaimsPrincipal:
    return principal_from_payload(dict(claims))


class TestAccessors(unittest.TestCase):
    def test_reads_token_claims(self) -> None:
        p = _principal(sub="12", unique_name="bob", email="bob@x.com", security_stamp="abc")
        self.assertEqual(get_user_id(p), 12)
        self.assertEqual(get_username(p), "bob")
        self.assertEqual(get_email(p), "bob@x.com")
        self.assertEqual(get_security_stamp(p), "abc")

    def test_missing_claims_return_zero_values(self) -> None:
        p = _principal()
        self.assertEqual(get_user_id(p), 0)
        self.assertEqual(get_username(p), "")
        self.assertEqual(get_email(p), "")
        self.assertEqual(get_security_stamp(p), "")
        self.assertFalse(is_admin(p))

    def test_none_principal_returns_zero_values(self) -> None:
        self.assertEqual(get_user_id(None), 0)
        self.assertEqual(get_username(None), "")
        self.assertFalse(has_role(None, Role.USER))

    def test_user_id_falls_back_to_nameid(self) -> None:
        self.assertEqual(get_user_id(_principal(nameid="44")), 44)

    def test_unparsable_user_id_is_zero(self) -> None:
        self.assertEqual(get_user_id(_principal(sub="not-a-number")), 0)


class TestRoles(unittest.TestCase):
    def test_list_claims_become_repeated_claims(self) -> None:
        p = _principal(sub="1", role=["User", "Admin"])
        self.assertEqual(p.find_all("role"), ["User", "Admin"])
        self.assertTrue(is_admin(p))
        self.assertTrue(has_role(p, "User"))

    def test_with_role_replaces_every_role_claim(self) -> None:
        p = _principal(sub="1", email="e@x.com", role=["Admin", "User"])
        updated = p.with_role("User")
        self.assertEqual(updated.find_all("role"), ["User"])
        self.assertFalse(is_admin(updated))
        self.assertEqual(get_email(updated), "e@x.com")
        # original is untouched
        self.assertTrue(is_admin(p))

    def test_with_role_adds_role_when_absent(self) -> None:
        p = ClaimsPrincipal(claims=(Claim("sub", "3"),))
        self.assertEqual(p.with_role("Admin").find_all("role"), ["Admin"])

    def test_unauthenticated_principal(self) -> None:
        p = ClaimsPrincipal(claims=(), authentication_type=None)
        self.assertFalse(p.is_authenticated)


if __name__ == "__main__":
    unittest.main()
