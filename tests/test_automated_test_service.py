"""Tests for the full-system AutomatedTestService run."""

import asyncio

import httpx

from qa_engine.application.services.automated_test_service import AutomatedTestService
from qa_engine.config.constants import CRITICAL_ROUTES
from qa_engine.schemas.core import TestStatus, Verdict
from qa_engine.schemas.tools.dependency_verifier import (
    FileDependency,
    PageDependencyMap,
    PageManifest,
)
from qa_engine.tools.catalog import build_crud_checks, build_endpoint_checks
from qa_engine.tools.dependency_verifier import DependencyVerifierTool, StaticResolver

RESOURCE_PATHS = (
    "/clients",
    "/invoices",
    "/products",
    "/payments",
    "/payments/summary",
    "/templates",
    "/reports/summary",
    "/notifications",
    "/credits/balance",
)


def public_backend(backend):
    backend.routes.update(
        {
            ("GET", "/health"): (200, {"status": "ok"}),
            ("POST", "/login"): (401, {"message": "Invalid credentials"}),
            ("POST", "/register"): (422, {"message": "Password required"}),
            ("GET", "/user"): (401, {"message": "Unauthenticated"}),
        }
    )
    for path in RESOURCE_PATHS:
        backend.routes[("GET", path)] = (401, {"message": "Unauthenticated"})


def small_verifier():
    manifest = PageManifest(
        pages=[
            PageDependencyMap(
                page_name="Clients",
                page_url="/clients",
                frontend_file="src/pages/Clients.tsx",
                dependencies=[FileDependency(path="src/pages/Clients.tsx", type="frontend")],
            )
        ]
    )
    return DependencyVerifierTool(
        manifest=manifest, resolver=StaticResolver(known=["src/pages/Clients.tsx"])
    )


def suites_by_name(report):
    return {s.name: s for s in report.suites}


class TestRunAll:
    """Full runs with and without a session."""

    def test_without_token_skips_crud(self, backend, make_probe):
        public_backend(backend)
        service = AutomatedTestService(make_probe(token=None), verifier_factory=small_verifier)

        report = asyncio.run(service.run_all())

        suites = suites_by_name(report)
        auth_check = suites["CRUD Auth Check"].tests[0]
        assert auth_check.status == TestStatus.SKIPPED
        assert "Client CRUD" not in suites
        assert report.cleanup_status is None
        assert suites["API Health"].passed == 1
        assert suites["Authentication API"].passed == 3
        assert all(
            r.status == TestStatus.WARNING for r in suites["Clients API"].tests
        )
        assert not any(r.method == "POST" and r.url.path == "/clients" for r in backend.requests)

        expected_catalog = (
            len(build_endpoint_checks())
            + 1
            + len(build_crud_checks())
            + 1
            + len(CRITICAL_ROUTES)
        )
        assert report.coverage == report.total_tests / expected_catalog
        assert report.verdict == Verdict.PARTIAL

    def test_with_token_runs_crud_and_cleanup(self, backend, probe):
        public_backend(backend)
        counter = {"value": 0}

        def create(kind):
            def handler(request):
                counter["value"] += 1
                return httpx.Response(201, json={kind: {"id": counter["value"]}})

            return handler

        for kind in ("client", "product", "template", "invoice"):
            backend.routes[("POST", f"/{kind}s")] = create(kind)
        # lifecycle reads and updates succeed, nothing can be deleted
        for entity_id in range(1, 6):
            for collection in ("clients", "products", "templates", "invoices"):
                backend.routes[("GET", f"/{collection}/{entity_id}")] = (200, {})
                backend.routes[("PUT", f"/{collection}/{entity_id}")] = (200, {})
        backend.routes[("POST", "/invoices/5/mark-paid")] = (200, {})
        backend.routes[("DELETE", "/clients/1")] = (200, {})

        service = AutomatedTestService(probe, verifier_factory=small_verifier)
        report = asyncio.run(service.run_all(include_dependencies=False))

        suites = suites_by_name(report)
        assert suites["CRUD Auth Check"].tests[0].status == TestStatus.PASSED
        assert suites["Client CRUD"].passed == 4
        assert suites["Invoice CRUD"].failed == 1
        cleanup = suites["Test Data Cleanup"]
        cleaned = {r.id for r in cleanup.tests}
        assert cleaned == {
            "cleanup_invoices_5",
            "cleanup_clients_4",
            "cleanup_products_2",
            "cleanup_templates_3",
        }
        assert report.cleanup_status.clients_deleted == 1
        assert "Page File Dependencies" not in suites

    def test_progress_reported(self, backend, make_probe):
        public_backend(backend)
        updates = []
        service = AutomatedTestService(make_probe(token=None), verifier_factory=small_verifier)

        asyncio.run(service.run_all(on_progress=lambda pct, result: updates.append(pct)))

        assert len(updates) == len(build_endpoint_checks())
        assert updates[-1] == 100

    def test_platform_health(self, backend, make_probe):
        public_backend(backend)
        service = AutomatedTestService(make_probe(token=None), verifier_factory=small_verifier)

        report = asyncio.run(service.run_all())

        assert report.system_health.api is True
        assert report.system_health.auth is True
        assert report.system_health.database is False
        assert report.system_health.storage is True


class TestVerifyDependencies:
    """Dependency-only report."""

    def test_report_holds_page_and_route_results(self, probe):
        service = AutomatedTestService(probe, verifier_factory=small_verifier)

        report = asyncio.run(service.verify_dependencies())

        assert [s.name for s in report.suites] == ["Page File Dependencies"]
        assert report.total_tests == 1 + len(CRITICAL_ROUTES)
        assert report.coverage == 1.0
        assert report.verdict == Verdict.PASS

    def test_core_groups_reported_first(self, probe):
        def verifier_with_core():
            tool = small_verifier()
            tool.manifest.core = [
                FileDependency(path="src/main.tsx", type="frontend"),
                FileDependency(path="api/index.php", type="backend"),
            ]
            return tool

        service = AutomatedTestService(probe, verifier_factory=verifier_with_core)

        report = asyncio.run(service.verify_dependencies())

        ids = [r.id for r in report.suites[0].tests]
        assert ids[:2] == ["core_files_frontend", "core_files_backend"]
        assert report.total_tests == 2 + 1 + len(CRITICAL_ROUTES)
        assert report.suites[0].tests[0].status == TestStatus.FAILED
        assert report.verdict == Verdict.FAIL
