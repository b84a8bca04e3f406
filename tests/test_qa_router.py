"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from qa_engine.application.services.automated_test_service import AutomatedTestService
from qa_engine.application.services.qa_console_service import QaConsoleService
from qa_engine.infra.di.container import (
    get_automated_test_service,
    get_qa_console_service,
)
from qa_engine.server import app
from qa_engine.tools.dependency_verifier import DependencyVerifierTool, StaticResolver


@pytest.fixture
def console(make_probe, tmp_path):
    return QaConsoleService(make_probe(token=None), export_dir=tmp_path)


@pytest.fixture
def client(console, make_probe):
    automated = AutomatedTestService(
        make_probe(token=None),
        verifier_factory=lambda: DependencyVerifierTool(resolver=StaticResolver()),
    )
    app.dependency_overrides[get_qa_console_service] = lambda: console
    app.dependency_overrides[get_automated_test_service] = lambda: automated
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestConsoleRuns:
    """POST /qa/runs and the exports that follow it."""

    def test_missing_token_is_401(self, client):
        response = client.post("/qa/runs", json={"system": "sms"})

        assert response.status_code == 401

    def test_run_with_bearer_header(self, client, backend):
        backend.routes[("GET", "/user")] = (200, {"user": {"id": 1}})

        response = client.post(
            "/qa/runs",
            json={"system": "shared"},
            headers={"Authorization": "Bearer header-token"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["system"] == "shared"
        assert body["summary"]["total"] == len(body["results"])
        assert body["progress"][-1] == 100
        assert "crossSystem" in body["health"]
        assert backend.requests[0].headers["Authorization"] == "Bearer header-token"

    def test_invalid_system_rejected(self, client):
        response = client.post("/qa/runs", json={"system": "billing", "token": "t"})

        assert response.status_code == 422

    def test_exports_need_a_run(self, client):
        assert client.post("/qa/exports/digest").status_code == 404
        assert client.post("/qa/exports/snapshot").status_code == 404

    def test_exports_after_run(self, client):
        client.post("/qa/runs", json={"system": "qr", "token": "body-token"})

        digest = client.post("/qa/exports/digest")
        assert digest.status_code == 200
        assert digest.text.startswith("=== QA DEBUG CONSOLE ERROR REPORT ===")
        assert "--- MISSING/NOT IMPLEMENTED ---" in digest.text

        snapshot = client.post("/qa/exports/snapshot")
        assert snapshot.status_code == 200
        assert "attachment" in snapshot.headers["content-disposition"]
        assert snapshot.json()["selectedSystem"] == "qr"


class TestCatalogEndpoints:
    """Read-only endpoints."""

    def test_catalog(self, client):
        response = client.get("/qa/catalog", params={"system": "qr"})

        assert response.status_code == 200
        ids = [entry["id"] for entry in response.json()]
        assert ids[0] == "qr_controller"
        assert "sms_credits_check" not in ids

    def test_structure(self, client):
        response = client.get("/qa/structure")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/markdown")
        assert "## Core Application Files" in response.text

    def test_dependencies(self, client):
        response = client.post("/qa/dependencies", json={})

        assert response.status_code == 200
        assert response.json()["suites"][0]["name"] == "Page File Dependencies"

    def test_full_report_as_text(self, client):
        response = client.post("/qa/reports", params={"format": "text"}, json={})

        assert response.status_code == 200
        assert "AUTOMATED SYSTEM TEST REPORT" in response.text

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestAdminEndpoints:
    """Seed, cleanup, status and backend health."""

    def test_seed_without_token_reports_error(self, client):
        response = client.post("/qa/seed", json={"system": "sms"})

        assert response.status_code == 200
        assert response.json()["notification"]["variant"] == "destructive"

    def test_seed_with_token(self, client, backend):
        backend.routes[("POST", "/admin/qa/seed")] = (200, {"seeded": {"clients": 2}})

        response = client.post("/qa/seed", json={"system": "qr", "token": "t"})

        body = response.json()
        assert body["notification"]["variant"] == "default"
        assert body["data"]["prefix"] == "QR_TEST_"

    def test_cleanup_uses_header_token(self, client, backend):
        backend.routes[("DELETE", "/admin/qa/cleanup")] = (200, {"cleaned": {}})

        response = client.delete(
            "/qa/cleanup",
            params={"system": "all"},
            headers={"Authorization": "Bearer admin"},
        )

        assert response.json()["notification"]["title"] == "Test data cleaned successfully"
        assert backend.requests[0].headers["Authorization"] == "Bearer admin"

    def test_backend_health(self, client, backend):
        backend.routes[("GET", "/admin/qa/health")] = (200, {"overall_status": "healthy"})

        response = client.get("/qa/health", headers={"Authorization": "Bearer admin"})

        assert response.json()["notification"]["title"] == "System Health: HEALTHY"
