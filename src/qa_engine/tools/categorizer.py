# qa_engine/tools/categorizer.py

from enum import Enum
from typing import Iterable

from qa_engine.schemas.core import (
    Bucket,
    Severity,
    SystemHealth,
    SystemTag,
    TestResult,
    TestStatus,
)


class CrossSystemPolicy(str, Enum):
    """How a failing result is recognised as a cross-system failure."""

    # the check declared itself cross-system
    EXPLICIT = "explicit"
    # any non-shared check that names a backend service
    INFERRED = "inferred"


def is_cross_system(
    result: TestResult, policy: CrossSystemPolicy = CrossSystemPolicy.EXPLICIT
) -> bool:
    if policy == CrossSystemPolicy.INFERRED:
        return bool(result.service) and result.system != SystemTag.SHARED
    return result.cross_system


def categorize(
    result: TestResult, policy: CrossSystemPolicy = CrossSystemPolicy.EXPLICIT
) -> Bucket:
    """Place one result in exactly one bucket."""
    if result.status == TestStatus.PASSED:
        return Bucket.WORKING
    if result.status == TestStatus.WARNING:
        return Bucket.WARNINGS
    if result.status == TestStatus.MISSING:
        return Bucket.MISSING
    # a skip means the check never ran (no session, missing prerequisite), so it
    # is reported as a warning rather than a defect
    if result.status == TestStatus.SKIPPED and result.severity != Severity.ERROR:
        return Bucket.WARNINGS
    # failed, errored skips and anything still pending/running
    if is_cross_system(result, policy):
        return Bucket.CROSS_SYSTEM
    return Bucket.ERRORS


def categorize_all(
    results: Iterable[TestResult],
    policy: CrossSystemPolicy = CrossSystemPolicy.EXPLICIT,
) -> SystemHealth:
    """Group results into buckets, keeping their order within each bucket."""
    health = SystemHealth()
    for result in results:
        health.bucket(categorize(result, policy)).append(result)
    return health
