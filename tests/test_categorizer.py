"""Tests for result categorization into health buckets."""

import pytest

from qa_engine.schemas.core import (
    Bucket,
    Severity,
    SystemTag,
    TestResult,
    TestStatus,
)
from qa_engine.tools.categorizer import (
    CrossSystemPolicy,
    categorize,
    categorize_all,
    is_cross_system,
)


def result(status, **fields):
    fields.setdefault("id", f"r_{status.value}")
    fields.setdefault("name", "Result")
    return TestResult(status=status, **fields)


class TestCategorize:
    """One result, one bucket."""

    @pytest.mark.parametrize(
        "status,bucket",
        [
            (TestStatus.PASSED, Bucket.WORKING),
            (TestStatus.WARNING, Bucket.WARNINGS),
            (TestStatus.MISSING, Bucket.MISSING),
            (TestStatus.SKIPPED, Bucket.WARNINGS),
            (TestStatus.FAILED, Bucket.ERRORS),
            (TestStatus.PENDING, Bucket.ERRORS),
        ],
    )
    def test_status_mapping(self, status, bucket):
        assert categorize(result(status)) == bucket

    def test_skipped_with_error_severity_is_error(self):
        skipped = result(TestStatus.SKIPPED, severity=Severity.ERROR)
        assert categorize(skipped) == Bucket.ERRORS

    def test_failed_cross_system_goes_to_cross_system(self):
        failed = result(TestStatus.FAILED, cross_system=True)
        assert categorize(failed) == Bucket.CROSS_SYSTEM

    def test_passed_cross_system_stays_working(self):
        passed = result(TestStatus.PASSED, cross_system=True)
        assert categorize(passed) == Bucket.WORKING

    def test_warning_cross_system_stays_warning(self):
        warning = result(TestStatus.WARNING, cross_system=True)
        assert categorize(warning) == Bucket.WARNINGS


class TestCrossSystemPolicy:
    """Explicit flags versus service-based inference."""

    def test_explicit_ignores_service(self):
        failed = result(TestStatus.FAILED, system=SystemTag.SMS, service="Credits")
        assert not is_cross_system(failed, CrossSystemPolicy.EXPLICIT)
        assert categorize(failed) == Bucket.ERRORS

    def test_inferred_uses_service(self):
        failed = result(TestStatus.FAILED, system=SystemTag.SMS, service="Credits")
        assert is_cross_system(failed, CrossSystemPolicy.INFERRED)
        assert categorize(failed, CrossSystemPolicy.INFERRED) == Bucket.CROSS_SYSTEM

    def test_inferred_never_for_shared(self):
        failed = result(TestStatus.FAILED, system=SystemTag.SHARED, service="Auth")
        assert categorize(failed, CrossSystemPolicy.INFERRED) == Bucket.ERRORS

    def test_inferred_needs_service(self):
        failed = result(TestStatus.FAILED, system=SystemTag.INVOICING)
        assert categorize(failed, CrossSystemPolicy.INFERRED) == Bucket.ERRORS


class TestCategorizeAll:
    """Grouping many results."""

    def test_every_result_in_exactly_one_bucket(self):
        results = [
            result(TestStatus.PASSED, id="a"),
            result(TestStatus.FAILED, id="b"),
            result(TestStatus.WARNING, id="c"),
            result(TestStatus.MISSING, id="d"),
            result(TestStatus.FAILED, id="e", cross_system=True),
            result(TestStatus.SKIPPED, id="f"),
        ]

        health = categorize_all(results)

        assert health.total == len(results)
        assert sorted(r.id for r in health.all_results()) == list("abcdef")
        assert health.summary() == {
            "total": 6,
            "passed": 1,
            "failed": 1,
            "warnings": 2,
            "missing": 1,
            "crossSystem": 1,
        }

    def test_order_kept_within_bucket(self):
        results = [result(TestStatus.FAILED, id=f"f{i}") for i in range(5)]
        assert [r.id for r in categorize_all(results).errors] == [f"f{i}" for i in range(5)]

    def test_empty(self):
        health = categorize_all([])
        assert health.total == 0
        assert health.summary()["total"] == 0

    def test_serializes_with_alias(self):
        health = categorize_all([result(TestStatus.FAILED, cross_system=True)])
        dumped = health.model_dump(by_alias=True)
        assert len(dumped["crossSystem"]) == 1
