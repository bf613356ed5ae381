"""
Integration tests for the JSON API (Flask test client).
"""

from datetime import datetime
from unittest.mock import Mock, patch

import pytest

from app import create_app
from conftest import FlakyStore


MARCH_ARGS = "startDate=2026-03-01T00:00:00&endDate=2026-04-01T00:00:00"


def _job_body(**overrides):
    body = {
        "jobId": "JOB-0001",
        "printerId": 1,
        "userId": 10,
        "departmentId": 100,
        "pageCount": 10,
        "colorPageCount": 1,
        "bwPageCount": 9,
        "timestamp": "2026-03-10T09:00:00",
        "documentName": "quarterly-report.pdf",
    }
    body.update(overrides)
    return body


@pytest.fixture
def app():
    return create_app("config.TestingConfig")


@pytest.fixture
def client(app):
    return app.test_client()


class TestSubmitPrintJob:

    def test_records_job_with_costs_and_savings(self, client):
        response = client.post("/api/v1/print-jobs", json=_job_body())

        assert response.status_code == 201
        job = response.get_json()["job"]
        assert job["id"] == 1
        assert job["colorPageCount"] == 0
        assert job["bwPageCount"] == 10
        assert job["isDuplex"] is True
        assert job["costBw"] == "100.00"
        assert job["costColor"] == "0.00"
        assert job["totalCost"] == "100.00"
        assert job["policiesApplied"] == ["COLOR_TO_BW_AUTO_CONVERT", "FORCE_DUPLEX"]
        assert job["policyApplied"] == "FORCE_DUPLEX"
        assert response.get_json()["savings"] == {
            "colorSavings": "120.00",
            "duplexSavings": "150.00",
            "totalSavings": "270.00",
        }

    def test_precondition_violation(self, client):
        response = client.post("/api/v1/print-jobs", json=_job_body(pageCount=0, bwPageCount=0))

        assert response.status_code == 400
        assert response.get_json()["type"] == "PreconditionViolation"

    def test_malformed_number(self, client):
        response = client.post("/api/v1/print-jobs", json=_job_body(pageCount="ten"))

        assert response.status_code == 400
        assert response.get_json()["type"] == "BadRequest"

    def test_body_must_be_object(self, client):
        response = client.post("/api/v1/print-jobs", json=[1, 2, 3])

        assert response.status_code == 400

    def test_submitted_policy_outcome_is_ignored(self, client):
        response = client.post("/api/v1/print-jobs", json=_job_body(
            pageCount=4, colorPageCount=4, bwPageCount=0, isDuplex=True,
            wasColorConverted=True, convertedColorPages=1000, wasDuplexEnforced=True,
            policiesApplied=["COLOR_TO_BW_AUTO_CONVERT"], totalCost="1.00", id=99,
        ))

        assert response.status_code == 201
        job = response.get_json()["job"]
        assert job["id"] == 1
        assert job["colorPageCount"] == 4
        assert job["wasColorConverted"] is False
        assert job["wasDuplexEnforced"] is False
        assert job["convertedColorPages"] == 0
        assert job["totalCost"] == "520.00"
        assert response.get_json()["savings"]["totalSavings"] == "0.00"

        analysis = client.get(f"/api/v1/print-jobs/cost-analysis?{MARCH_ARGS}").get_json()
        assert analysis["colorSavings"] == "0.00"
        assert analysis["duplexSavings"] == "0.00"

    @pytest.mark.parametrize("overrides", [
        {"pageCount": 2.9, "bwPageCount": 2.9, "colorPageCount": 0},
        {"isDuplex": "maybe"},
        {"timestamp": 1773133200},
    ])
    def test_wrongly_typed_fields_are_rejected(self, client, overrides):
        response = client.post("/api/v1/print-jobs", json=_job_body(**overrides))

        assert response.status_code == 400
        assert response.get_json()["type"] == "BadRequest"

    def test_store_unavailable(self):
        store = FlakyStore()
        store.failing = True
        client = create_app("config.TestingConfig", store=store).test_client()

        response = client.post("/api/v1/print-jobs", json=_job_body())

        assert response.status_code == 503
        assert response.get_json()["type"] == "StoreUnavailableError"


class TestListPrintJobs:

    def test_lists_by_department(self, client):
        client.post("/api/v1/print-jobs", json=_job_body())
        client.post("/api/v1/print-jobs", json=_job_body(jobId="JOB-0002", departmentId=200))

        response = client.get(f"/api/v1/print-jobs?departmentId=100&{MARCH_ARGS}")

        assert response.status_code == 200
        data = response.get_json()
        assert data["count"] == 1
        assert data["jobs"][0]["jobId"] == "JOB-0001"

    def test_bad_integer(self, client):
        response = client.get("/api/v1/print-jobs?departmentId=sales")

        assert response.status_code == 400


class TestStatistics:

    def test_overall_after_submission(self, client):
        client.post("/api/v1/print-jobs", json=_job_body())

        response = client.get(f"/api/v1/print-jobs/stats?{MARCH_ARGS}")

        assert response.status_code == 200
        data = response.get_json()
        assert data["totalJobs"] == 1
        assert data["totalPages"] == 10
        assert data["totalBwPages"] == 10
        assert data["totalColorPages"] == 0
        assert data["totalCost"] == "100.00"
        assert data["colorSavings"] == "120.00"
        assert data["duplexSavings"] == "150.00"
        assert data["totalSavings"] == "270.00"

    def test_empty_window(self, client):
        response = client.get(f"/api/v1/print-jobs/stats?{MARCH_ARGS}")

        assert response.status_code == 200
        assert response.get_json()["totalJobs"] == 0
        assert response.get_json()["totalCost"] == "0.00"

    def test_defaults_to_current_month(self, client):
        response = client.get("/api/v1/print-jobs/stats")

        assert response.status_code == 200
        assert response.get_json()["periodStart"].endswith("-01T00:00:00")

    def test_default_window_is_served_from_cache(self, app, client):
        clock = Mock(wraps=datetime)
        clock.now.side_effect = [
            datetime(2026, 3, 10, 9, 0, 5, 120000),
            datetime(2026, 3, 10, 9, 0, 41, 987000),
        ]

        with patch("routes.print_jobs.datetime", clock):
            first = client.get("/api/v1/print-jobs/stats").get_json()
            second = client.get("/api/v1/print-jobs/stats").get_json()

        assert first["periodStart"] == "2026-03-01T00:00:00"
        assert first["periodEnd"] == "2026-03-10T09:01:00"
        assert second["periodEnd"] == first["periodEnd"]
        cache = app.config["STATISTICS_SERVICE"].cache
        assert cache.hits == 1
        assert cache.misses == 1

    def test_bad_date(self, client):
        response = client.get("/api/v1/print-jobs/stats?startDate=yesterday")

        assert response.status_code == 400
        assert "startDate" in response.get_json()["error"]

    def test_end_before_start(self, client):
        response = client.get(
            "/api/v1/print-jobs/stats?startDate=2026-04-01T00:00:00&endDate=2026-03-01T00:00:00"
        )

        assert response.status_code == 400
        assert response.get_json()["type"] == "QueryRangeError"

    def test_store_unavailable(self):
        store = FlakyStore()
        client = create_app("config.TestingConfig", store=store).test_client()
        store.failing = True

        response = client.get(f"/api/v1/print-jobs/stats?{MARCH_ARGS}")

        assert response.status_code == 503
        assert response.get_json()["details"]["timeout_seconds"] == "5.0"

    def test_by_department_and_printer(self, client):
        client.post("/api/v1/print-jobs", json=_job_body())
        client.post("/api/v1/print-jobs", json=_job_body(jobId="JOB-0002", departmentId=200, printerId=2))
        client.post("/api/v1/print-jobs", json=_job_body(jobId="JOB-0003", departmentId=200, printerId=2))

        departments = client.get(f"/api/v1/print-jobs/by-department?{MARCH_ARGS}").get_json()
        printers = client.get(f"/api/v1/print-jobs/by-printer?{MARCH_ARGS}").get_json()

        assert [d["departmentId"] for d in departments["departments"]] == [100, 200]
        assert [(p["printerId"], p["totalJobs"]) for p in printers["printers"]] == [(2, 2), (1, 1)]

    def test_by_user_requires_department(self, client):
        response = client.get(f"/api/v1/print-jobs/by-user?{MARCH_ARGS}")

        assert response.status_code == 400

    def test_by_user(self, client):
        client.post("/api/v1/print-jobs", json=_job_body())

        response = client.get(f"/api/v1/print-jobs/by-user?departmentId=100&{MARCH_ARGS}")

        data = response.get_json()
        assert data["departmentId"] == 100
        assert data["users"][0]["userId"] == 10
        assert data["users"][0]["totalCost"] == "100.00"

    def test_cost_analysis(self, client):
        client.post("/api/v1/print-jobs", json=_job_body())

        response = client.get(f"/api/v1/print-jobs/cost-analysis?departmentId=100&{MARCH_ARGS}")

        data = response.get_json()
        assert data["departmentId"] == 100
        assert data["colorConvertedCount"] == 1
        assert data["totalSavings"] == "270.00"


class TestPolicies:

    def test_get_policies(self, client):
        data = client.get("/api/v1/policies").get_json()

        assert data["force_duplex"] is True
        assert data["color_page_ratio_threshold"] == "0.1"

    def test_hot_reload_applies_to_next_submission(self, client):
        response = client.put("/api/v1/policies", json={"force_duplex": False})

        assert response.status_code == 200
        assert response.get_json()["force_duplex"] is False

        job = client.post("/api/v1/print-jobs", json=_job_body()).get_json()["job"]
        assert job["isDuplex"] is False
        assert job["totalCost"] == "300.00"

    def test_invalid_value_changes_nothing(self, client):
        response = client.put("/api/v1/policies", json={"color_page_ratio_threshold": "1.5"})

        assert response.status_code == 400
        assert response.get_json()["type"] == "ConfigurationError"
        assert client.get("/api/v1/policies").get_json()["color_page_ratio_threshold"] == "0.1"

    def test_empty_body(self, client):
        response = client.put("/api/v1/policies", json={})

        assert response.status_code == 400


class TestHealth:

    def test_health(self, client):
        client.get(f"/api/v1/print-jobs/stats?{MARCH_ARGS}")

        response = client.get("/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "ok"
        assert data["environment"] == "testing"
        assert data["checks"]["statistics_cache"]["entries"] == 1
        assert data["checks"]["statistics_cache"]["misses"] == 1
