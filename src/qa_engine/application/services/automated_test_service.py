# qa_engine/application/services/automated_test_service.py

from typing import Callable, List, Optional, Sequence, Tuple

from qa_engine.common.logger import LoggerFactory, LoggerType, LogLevel
from qa_engine.config.constants import CRITICAL_ROUTES
from qa_engine.schemas.core import (
    CleanupStatus,
    Priority,
    SystemTag,
    TestCategory,
    TestReport,
    TestResult,
    TestStatus,
    TestSuite,
    utc_now,
)
from qa_engine.schemas.tools.dependency_verifier import DependencyVerifierInput
from qa_engine.tools.api_probe import ApiProbeTool
from qa_engine.tools.catalog import build_crud_checks, build_endpoint_checks
from qa_engine.tools.cleanup import cleanup_tracked_data, count_deletions
from qa_engine.tools.data_tracker import TestDataTracker
from qa_engine.tools.dependency_verifier import DependencyVerifierTool
from qa_engine.tools.test_executor import ProgressCallback, TestExecutorTool
from qa_engine.tools.test_reporter import build_report, build_suite

# (suite name, category, ids of the endpoint checks it holds)
ENDPOINT_SUITES: List[Tuple[str, TestCategory, Sequence[str]]] = [
    ("API Health", TestCategory.API, ["api_health"]),
    (
        "Authentication API",
        TestCategory.AUTH,
        ["auth_login_accessible", "auth_register_accessible", "auth_current_user"],
    ),
    ("Clients API", TestCategory.API, ["api_clients"]),
    ("Invoices API", TestCategory.API, ["api_invoices"]),
    ("Products API", TestCategory.API, ["api_products"]),
    ("Payments API", TestCategory.API, ["api_payments", "api_payments_summary"]),
    ("Templates API", TestCategory.API, ["api_templates"]),
    ("Reports API", TestCategory.API, ["api_reports_summary"]),
    ("Notifications API", TestCategory.API, ["api_notifications"]),
    ("Credits API", TestCategory.API, ["api_credits_balance"]),
]

# (suite name, id prefix of its lifecycle steps)
CRUD_SUITES = [
    ("Client CRUD", "client_crud_"),
    ("Product CRUD", "product_crud_"),
    ("Template CRUD", "template_crud_"),
    ("Invoice CRUD", "invoice_crud_"),
]


def _sum_cleanup(*statuses: CleanupStatus) -> CleanupStatus:
    fields = CleanupStatus.model_fields.keys()
    return CleanupStatus(**{f: sum(getattr(s, f) for s in statuses) for f in fields})


class AutomatedTestService:
    """
    Full-system run: API accessibility, CRUD lifecycles with cleanup, and
    page dependency verification, aggregated into one TestReport.

    Unlike the console run this does not require a session. Without a token
    the CRUD lifecycles are left out and the report records why.
    """

    def __init__(
        self,
        probe: ApiProbeTool,
        verifier_factory: Optional[Callable[[], DependencyVerifierTool]] = None,
        verbose: bool = False,
    ):
        self.probe = probe
        self.verifier_factory = verifier_factory or (
            lambda: DependencyVerifierTool(probe=probe, verbose=verbose)
        )
        self.verbose = verbose
        self.logger = LoggerFactory.get_logger(
            name="service.automated_test",
            logger_type=LoggerType.STANDARD,
            level=LogLevel.DEBUG if verbose else LogLevel.INFO,
        )

    def _executor(self, tracker: TestDataTracker) -> TestExecutorTool:
        return TestExecutorTool(
            probe=self.probe, tracker=tracker, require_token=False, verbose=self.verbose
        )

    @staticmethod
    def _auth_check(token: Optional[str]) -> TestResult:
        return TestResult(
            id="crud_auth_check",
            name="Authentication Check for CRUD",
            category=TestCategory.CRUD,
            priority=Priority.P0,
            status=TestStatus.PASSED if token else TestStatus.SKIPPED,
            message=(
                "User authenticated - CRUD tests will run"
                if token
                else "User not authenticated - CRUD tests will be skipped. Please login first."
            ),
            system=SystemTag.SHARED,
        )

    async def run_all(
        self,
        token: Optional[str] = None,
        include_dependencies: bool = True,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TestReport:
        """Run every suite and build the report."""
        start = utc_now()
        token = token or self.probe.current_token()
        tracker = TestDataTracker()
        suites: List[TestSuite] = []
        catalog_size = 0

        endpoint_checks = build_endpoint_checks()
        catalog_size += len(endpoint_checks)
        suite_start = utc_now()
        endpoint_run = await self._executor(tracker).run(
            endpoint_checks, token=token, on_progress=on_progress
        )
        by_id = {r.id: r for r in endpoint_run.results}
        for name, category, ids in ENDPOINT_SUITES:
            results = [by_id[i] for i in ids if i in by_id]
            suites.append(build_suite(name, category, results, suite_start, utc_now()))

        auth_check = self._auth_check(token)
        catalog_size += 1
        suites.append(build_suite("CRUD Auth Check", TestCategory.CRUD, [auth_check]))

        crud_checks = build_crud_checks()
        catalog_size += len(crud_checks)
        cleanup_status = None
        if token:
            suite_start = utc_now()
            crud_run = await self._executor(tracker).run(
                crud_checks, token=token, on_progress=on_progress
            )
            for name, prefix in CRUD_SUITES:
                results = [r for r in crud_run.results if r.id.startswith(prefix)]
                suites.append(
                    build_suite(name, TestCategory.CRUD, results, suite_start, utc_now())
                )

            cleanup_results, swept = await cleanup_tracked_data(
                self.probe.with_token(token), tracker
            )
            suites.append(build_suite("Test Data Cleanup", TestCategory.CRUD, cleanup_results))
            cleanup_status = _sum_cleanup(count_deletions(crud_run.results), swept)
        else:
            self.logger.warning("No session token; CRUD lifecycles skipped")

        if include_dependencies:
            verifier = self.verifier_factory()
            output = await verifier.execute(DependencyVerifierInput())
            results = verifier.to_test_results(output)
            catalog_size += len(output.core) + len(output.pages) + len(CRITICAL_ROUTES)
            suites.append(
                build_suite("Page File Dependencies", TestCategory.FRONTEND, results)
            )

        report = build_report(
            suites,
            catalog_size,
            cleanup_status=cleanup_status,
            start=start,
            end=utc_now(),
        )
        self.logger.info(
            f"Full run finished: {report.verdict.value}, "
            f"{report.passed}/{report.total_tests} passed"
        )
        return report

    async def verify_dependencies(self, check_endpoints: bool = False) -> TestReport:
        """Report containing only the page dependency suite."""
        verifier = self.verifier_factory()
        output = await verifier.execute(
            DependencyVerifierInput(check_endpoints=check_endpoints)
        )
        results = verifier.to_test_results(output)
        suite = build_suite("Page File Dependencies", TestCategory.FRONTEND, results)
        return build_report([suite], len(results))
