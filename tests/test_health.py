"""Tests for health checks: config sanity, database connectivity, endpoints."""

import unittest
from unittest.mock import MagicMock

from pydantic import SecretStr
from sqlalchemy.exc import OperationalError

from app.services.health import (
    HEALTHY,
    UNHEALTHY,
    HealthCheck,
    available_tags,
    run_health_checks,
)
from tests.support import API, ApiTestCase, bearer, make_settings


def _working_factory() -> MagicMock:
    return MagicMock(return_value=MagicMock())


class TestRunHealthChecks(unittest.TestCase):
    def test_valid_configuration_is_healthy(self) -> None:
        report = run_health_checks(make_settings(), _working_factory())
        self.assertEqual(report.status, HEALTHY)
        self.assertEqual(set(report.entries), {"jwt", "database_config", "cors", "database"})
        self.assertEqual(report.entries["jwt"].data["JWT_SECRET"], "***CONFIGURED***")

    def test_insecure_cors_is_unhealthy(self) -> None:
        settings = make_settings(CORS_ALLOWED_ORIGINS=["*"], CORS_ALLOW_CREDENTIALS=True)
        report = run_health_checks(settings, _working_factory(), tag="config")
        self.assertEqual(report.status, UNHEALTHY)
        self.assertEqual(report.entries["cors"].status, UNHEALTHY)
        self.assertEqual(report.entries["jwt"].status, HEALTHY)

    def test_short_secret_is_unhealthy(self) -> None:
        settings = make_settings().model_copy(update={"JWT_SECRET": SecretStr("short")})
        report = run_health_checks(settings, _working_factory(), tag="config")
        self.assertEqual(report.entries["jwt"].status, UNHEALTHY)
        self.assertIn("JWT_SECRET", report.entries["jwt"].description)

    def test_unreachable_database_is_unhealthy(self) -> None:
        session = MagicMock()
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        report = run_health_checks(make_settings(), MagicMock(return_value=session), tag="database")
        self.assertEqual(report.entries["database"].status, UNHEALTHY)
        session.close.assert_called_once()

    def test_tag_filter(self) -> None:
        report = run_health_checks(make_settings(), _working_factory(), tag="config")
        self.assertEqual(set(report.entries), {"jwt", "database_config", "cors"})

    def test_raising_check_is_reported_unhealthy(self) -> None:
        def boom(settings, factory):
            raise RuntimeError("exploded")

        checks = (HealthCheck("boom", ("custom",), boom),)
        report = run_health_checks(make_settings(), _working_factory(), checks=checks)
        self.assertEqual(report.status, UNHEALTHY)
        self.assertIn("exploded", report.entries["boom"].description)

    def test_available_tags(self) -> None:
        self.assertEqual(available_tags(), ["config", "database"])


class TestHealthEndpoints(ApiTestCase):
    def test_health_is_anonymous_and_healthy(self) -> None:
        resp = self.client.get(f"{API}/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "Healthy")
        self.assertEqual(resp.json()["environment"], "dev")

    def test_config_health_lists_checks(self) -> None:
        resp = self.client.get(f"{API}/health/config")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["filtered_by_tag"], "config")
        self.assertEqual(body["checks"]["jwt"]["data"]["JWT_SECRET"], "***CONFIGURED***")
        self.assertNotIn(self.settings.JWT_SECRET.get_secret_value(), resp.text)

    def test_health_by_tag(self) -> None:
        resp = self.client.get(f"{API}/health/tag/database")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(set(resp.json()["checks"]), {"database_config", "database"})

    def test_health_tags(self) -> None:
        resp = self.client.get(f"{API}/health/tags")
        self.assertEqual(resp.json()["tags"], ["config", "database"])
        self.assertEqual(resp.json()["total_checks"], 4)


class TestConfigEndpoints(ApiTestCase):
    def test_config_requires_admin(self) -> None:
        body = self.register("bob")
        self.assertEqual(self.client.get(f"{API}/config/all").status_code, 401)
        resp = self.client.get(f"{API}/config/all", headers=bearer(body["token"]))
        self.assertEqual(resp.status_code, 403)

    def test_admin_sees_masked_config(self) -> None:
        token, _ = self.register_admin()
        resp = self.client.get(f"{API}/config/all", headers=bearer(token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["jwt"]["JWT_SECRET"], "***CONFIGURED***")
        self.assertEqual(resp.json()["database"]["DATABASE_URL"], "***CONFIGURED***")
        self.assertNotIn(self.settings.JWT_SECRET.get_secret_value(), resp.text)

    def test_validate_reports_sections(self) -> None:
        token, _ = self.register_admin()
        resp = self.client.get(f"{API}/config/validate", headers=bearer(token))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["all_valid"])
        self.assertEqual(set(resp.json()["results"]), {"jwt", "database", "cors"})

    def test_section_endpoint(self) -> None:
        token, _ = self.register_admin()
        resp = self.client.get(f"{API}/config/cors", headers=bearer(token))
        self.assertEqual(resp.json()["section"], "cors")
        self.assertEqual(resp.json()["config"]["CORS_ALLOWED_ORIGINS"], ["*"])


if __name__ == "__main__":
    unittest.main()
