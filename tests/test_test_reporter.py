"""Tests for report aggregation."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from qa_engine.schemas.core import (
    CleanupStatus,
    PlatformHealth,
    Priority,
    TestCategory,
    TestResult,
    TestStatus,
    Verdict,
)
from qa_engine.schemas.tools.test_reporter import TestReporterInput
from qa_engine.tools.test_reporter import (
    TestReporterTool,
    build_report,
    build_suite,
    compute_confidence,
    compute_coverage,
    compute_verdict,
    derive_platform_health,
)


def result(status, priority=Priority.P1, **fields):
    fields.setdefault("id", f"r_{status.value}_{priority.value}")
    fields.setdefault("name", "Result")
    return TestResult(status=status, priority=priority, **fields)


class TestVerdict:
    """Verdict precedence."""

    def test_p0_failure_fails(self):
        results = [result(TestStatus.PASSED), result(TestStatus.FAILED, Priority.P0)]
        assert compute_verdict(results) == Verdict.FAIL

    def test_non_p0_failure_is_partial(self):
        results = [result(TestStatus.PASSED), result(TestStatus.FAILED, Priority.P2)]
        assert compute_verdict(results) == Verdict.PARTIAL

    def test_warning_is_partial(self):
        assert compute_verdict([result(TestStatus.WARNING)]) == Verdict.PARTIAL

    def test_missing_is_partial(self):
        assert compute_verdict([result(TestStatus.MISSING)]) == Verdict.PARTIAL

    def test_all_passed(self):
        assert compute_verdict([result(TestStatus.PASSED)]) == Verdict.PASS

    def test_skips_do_not_degrade(self):
        results = [result(TestStatus.PASSED), result(TestStatus.SKIPPED, Priority.P0)]
        assert compute_verdict(results) == Verdict.PASS

    def test_nothing_ran(self):
        assert compute_verdict([]) == Verdict.UNKNOWN


class TestScores:
    """Coverage and confidence."""

    @pytest.mark.parametrize(
        "total,catalog,expected",
        [(5, 10, 0.5), (10, 10, 1.0), (12, 10, 1.0), (0, 10, 0.0), (3, 0, 0.0)],
    )
    def test_coverage(self, total, catalog, expected):
        assert compute_coverage(total, catalog) == expected

    def test_confidence_rounds_half_up(self):
        # 1.0 * 1/8 * 100 = 12.5
        assert compute_confidence(1.0, 1, 8) == 13

    def test_confidence_scaled_by_coverage(self):
        assert compute_confidence(0.5, 10, 10) == 50

    def test_confidence_without_tests(self):
        assert compute_confidence(0.0, 0, 0) == 0


class TestSuites:
    """Suite counts and report totals."""

    def test_suite_counts(self):
        suite = build_suite(
            "Clients API",
            TestCategory.API,
            [
                result(TestStatus.PASSED, id="a"),
                result(TestStatus.FAILED, id="b"),
                result(TestStatus.SKIPPED, id="c"),
                result(TestStatus.WARNING, id="d"),
            ],
        )
        assert (suite.passed, suite.failed, suite.skipped, suite.warnings) == (1, 1, 1, 1)
        assert suite.end_time >= suite.start_time

    def test_report_totals_equal_suite_sums(self):
        suites = [
            build_suite("One", TestCategory.API, [result(TestStatus.PASSED, id="a")]),
            build_suite(
                "Two",
                TestCategory.CRUD,
                [
                    result(TestStatus.FAILED, Priority.P0, id="b"),
                    result(TestStatus.MISSING, id="c"),
                ],
            ),
        ]

        report = build_report(suites, catalog_size=6, report_id="r1")

        assert report.id == "r1"
        assert report.total_tests == 3
        assert report.passed == 1
        assert report.failed == 1
        assert report.missing == 1
        assert report.coverage == 0.5
        assert report.verdict == Verdict.FAIL
        # 0.5 * 1/3 * 100 = 16.67
        assert report.confidence == 17

    def test_report_uses_given_times(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = start + timedelta(seconds=5)

        report = build_report([], 0, start=start, end=end)

        assert report.start_time == start
        assert report.end_time == end
        assert report.verdict == Verdict.UNKNOWN
        assert report.coverage == 0.0

    def test_report_generates_id(self):
        assert build_report([], 0).id != build_report([], 0).id

    def test_cleanup_status_carried(self):
        report = build_report([], 0, cleanup_status=CleanupStatus(clients_deleted=2))
        assert report.cleanup_status.clients_deleted == 2


class TestPlatformHealth:
    """Health flags derived from passing results."""

    def test_flags_from_results(self):
        suites = [
            build_suite(
                "Mixed",
                TestCategory.API,
                [
                    result(TestStatus.PASSED, id="api_health"),
                    result(TestStatus.PASSED, id="login", category=TestCategory.AUTH),
                    result(TestStatus.FAILED, id="crud", category=TestCategory.CRUD),
                    result(TestStatus.PASSED, id="page", category=TestCategory.FRONTEND),
                ],
            )
        ]

        health = derive_platform_health(suites)

        assert health == PlatformHealth(
            api=True, auth=True, database=False, storage=True, email=False
        )

    def test_email_from_service(self):
        suite = build_suite(
            "Email", TestCategory.API, [result(TestStatus.PASSED, service="Email")]
        )
        assert derive_platform_health([suite]).email is True

    def test_explicit_health_wins(self):
        explicit = PlatformHealth(api=True, database=True)
        report = build_report([], 0, platform_health=explicit)
        assert report.system_health == explicit


class TestFullRunScenario:
    """A complete ten-check run."""

    def test_seven_passed_two_failed_one_missing(self):
        results = [result(TestStatus.PASSED, id=f"pass_{i}") for i in range(7)]
        results += [
            result(TestStatus.FAILED, Priority.P0, id="login_p0"),
            result(TestStatus.FAILED, Priority.P2, id="reports_p2"),
            result(TestStatus.MISSING, id="qr_codes"),
        ]
        suite = build_suite("Everything", TestCategory.API, results)

        report = build_report([suite], 10)

        assert report.total_tests == 10
        assert (report.passed, report.failed, report.missing) == (7, 2, 1)
        assert report.verdict == Verdict.FAIL
        assert report.coverage == 1.0
        assert report.confidence == 70

    @pytest.mark.parametrize(
        "base",
        [
            [],
            [TestStatus.PASSED],
            [TestStatus.PASSED, TestStatus.WARNING],
            [TestStatus.MISSING, TestStatus.SKIPPED],
            [TestStatus.FAILED, TestStatus.PASSED, TestStatus.PASSED],
        ],
    )
    def test_failed_p0_always_fails_the_verdict(self, base):
        results = [result(status, id=f"base_{i}") for i, status in enumerate(base)]
        results.append(result(TestStatus.FAILED, Priority.P0, id="critical"))

        assert compute_verdict(results) == Verdict.FAIL


class TestReporterToolRun:
    """Tool wrapper."""

    def test_execute(self):
        suite = build_suite("One", TestCategory.API, [result(TestStatus.PASSED)])

        output = asyncio.run(
            TestReporterTool().execute(TestReporterInput(suites=[suite], catalog_size=1))
        )

        assert output.report.verdict == Verdict.PASS
        assert output.report.confidence == 100
