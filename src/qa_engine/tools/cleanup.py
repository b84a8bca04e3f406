# qa_engine/tools/cleanup.py

from typing import Iterable, List, Tuple

from qa_engine.common.logger import LoggerFactory, LoggerType
from qa_engine.schemas.core import (
    CleanupStatus,
    Priority,
    SystemTag,
    TestCategory,
    TestResult,
    TestStatus,
)
from qa_engine.tools.api_probe import ApiProbeTool
from qa_engine.tools.data_tracker import EntityKind, TestDataTracker

logger = LoggerFactory.get_logger(name="cleanup", logger_type=LoggerType.STANDARD)

# invoices reference clients, so they go first
DELETION_ORDER = [
    EntityKind.INVOICES,
    EntityKind.CLIENTS,
    EntityKind.PRODUCTS,
    EntityKind.TEMPLATES,
]

KIND_NAMES = {kind.value for kind in EntityKind}


def _result(result_id: str, name: str, status: TestStatus, message: str, **fields) -> TestResult:
    return TestResult(
        id=result_id,
        name=name,
        category=TestCategory.CRUD,
        priority=Priority.P2,
        status=status,
        message=message,
        system=SystemTag.SHARED,
        **fields,
    )


async def cleanup_tracked_data(
    probe: ApiProbeTool, tracker: TestDataTracker
) -> Tuple[List[TestResult], CleanupStatus]:
    """Delete every tracked entity; ids whose deletion fails stay tracked.

    Returns:
        One result per tracked id plus per-kind deletion counts
    """
    results: List[TestResult] = []
    deleted = {kind: 0 for kind in EntityKind}

    for kind in DELETION_ORDER:
        title = kind.value[:-1].capitalize()
        for entity_id in tracker.ids(kind):
            response = await probe.probe("DELETE", f"/{kind.value}/{entity_id}")
            if response.success:
                deleted[kind] += 1
                tracker.untrack(kind, entity_id)
            else:
                logger.warning(f"Could not delete {kind.value}/{entity_id}: {response.error}")
            results.append(
                _result(
                    f"cleanup_{kind.value}_{entity_id}",
                    f"Cleanup {title} {entity_id}",
                    TestStatus.PASSED if response.success else TestStatus.WARNING,
                    "Cleaned up" if response.success else "Cleanup failed (may already be deleted)",
                    endpoint=f"DELETE /{kind.value}/{{id}}",
                    duration_ms=response.duration_ms,
                    data_deleted=response.success,
                )
            )

    for entity_id in tracker.ids(EntityKind.PAYMENTS):
        results.append(
            _result(
                f"cleanup_payments_{entity_id}",
                f"Cleanup Payment {entity_id}",
                TestStatus.WARNING,
                "Payments cannot be deleted through the API; left in place",
            )
        )

    if not results:
        results.append(
            _result(
                "cleanup_check",
                "Cleanup Check",
                TestStatus.PASSED,
                "No orphaned test data found",
            )
        )

    status = CleanupStatus(
        clients_deleted=deleted[EntityKind.CLIENTS],
        products_deleted=deleted[EntityKind.PRODUCTS],
        invoices_deleted=deleted[EntityKind.INVOICES],
        payments_deleted=0,
        templates_deleted=deleted[EntityKind.TEMPLATES],
    )
    logger.info(f"Cleanup finished: {len(results)} results")
    return results, status


def count_deletions(results: Iterable[TestResult]) -> CleanupStatus:
    """Per-kind count of results that report a successful deletion."""
    counts = {kind: 0 for kind in EntityKind}
    for result in results:
        if not result.data_deleted or not result.endpoint:
            continue
        method, _, path = result.endpoint.partition(" ")
        segment = path.strip("/").split("/", 1)[0]
        if method == "DELETE" and segment in KIND_NAMES:
            counts[EntityKind(segment)] += 1
    return CleanupStatus(
        clients_deleted=counts[EntityKind.CLIENTS],
        products_deleted=counts[EntityKind.PRODUCTS],
        invoices_deleted=counts[EntityKind.INVOICES],
        payments_deleted=counts[EntityKind.PAYMENTS],
        templates_deleted=counts[EntityKind.TEMPLATES],
    )
