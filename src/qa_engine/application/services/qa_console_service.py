# qa_engine/application/services/qa_console_service.py

from pathlib import Path
from typing import List, Optional, Union

from qa_engine.common.errors import ExportError
from qa_engine.common.logger import LoggerFactory, LoggerType, LogLevel
from qa_engine.config import settings
from qa_engine.config.constants import ERROR_MESSAGES, SEED_PREFIXES
from qa_engine.schemas.core import SystemFilter
from qa_engine.schemas.tools.api_probe import ProbeResult
from qa_engine.schemas.tools.qa_console import (
    ActionOutcome,
    ConsoleRun,
    Notification,
    NotificationVariant,
)
from qa_engine.schemas.tools.test_catalog import RunOptions
from qa_engine.tools.api_probe import ApiProbeTool
from qa_engine.tools.catalog import build_catalog, filter_catalog
from qa_engine.tools.catalog.helpers import describe_counts, failure_message
from qa_engine.tools.categorizer import CrossSystemPolicy, categorize_all
from qa_engine.tools.data_tracker import TestDataTracker
from qa_engine.tools.test_executor import TestExecutorTool
from qa_engine.utils.report_utils import (
    build_snapshot,
    copy_to_clipboard,
    format_error_digest,
    write_snapshot,
)


def _error(title: str, description: str) -> Notification:
    return Notification(
        title=title, description=description, variant=NotificationVariant.DESTRUCTIVE
    )


class QaConsoleService:
    """
    Operations behind the QA console.

    Each action reports its outcome as a Notification. Only run_tests() raises,
    and only AuthenticationRequiredError, so callers can send the user back to
    log in.
    """

    def __init__(
        self,
        probe: ApiProbeTool,
        export_dir: Optional[Union[str, Path]] = None,
        policy: CrossSystemPolicy = CrossSystemPolicy.EXPLICIT,
        verbose: bool = False,
    ):
        self.probe = probe
        self.export_dir = Path(export_dir or settings.EXPORT_DIR)
        self.policy = policy
        self.verbose = verbose
        self.last_run: Optional[ConsoleRun] = None
        self.test_data_seeded = False
        self.logger = LoggerFactory.get_logger(
            name="service.qa_console",
            logger_type=LoggerType.STANDARD,
            level=LogLevel.DEBUG if verbose else LogLevel.INFO,
        )

    async def run_tests(
        self,
        system: SystemFilter = SystemFilter.ALL,
        options: Optional[RunOptions] = None,
        token: Optional[str] = None,
    ) -> ConsoleRun:
        """Run the console checks for one system and categorize the results.

        Raises:
            AuthenticationRequiredError: No session token is available
        """
        options = options or RunOptions()
        definitions = filter_catalog(build_catalog(), system)
        progress: List[int] = []

        executor = TestExecutorTool(
            probe=self.probe, tracker=TestDataTracker(), verbose=self.verbose
        )
        output = await executor.run(
            definitions,
            options=options,
            token=token,
            on_progress=lambda pct, _result: progress.append(pct),
        )

        health = categorize_all(output.results, self.policy)
        summary = health.summary()
        run = ConsoleRun(
            user_mode=options.user_mode,
            system=SystemFilter(system),
            results=output.results,
            health=health,
            progress=progress,
            tracked_data=output.tracked_data,
            notification=Notification(
                title="QA Tests Complete",
                description=(
                    f"{summary['passed']} passed, {summary['failed']} failed, "
                    f"{summary['warnings']} warnings"
                ),
            ),
        )
        self.last_run = run
        self.logger.info(f"Console run for {run.system.value}: {summary}")
        return run

    def _authorized(self, token: Optional[str]) -> Optional[ApiProbeTool]:
        token = token or self.probe.current_token()
        if not token:
            return None
        return self.probe.with_token(token)

    async def _admin_call(
        self,
        method: str,
        path: str,
        token: Optional[str],
        failure_title: str,
        failure_key: str,
        body: Optional[dict] = None,
    ):
        """Shared plumbing for the /admin/qa actions.

        Returns:
            (ProbeResult, None) on success, (None, ActionOutcome) otherwise
        """
        probe = self._authorized(token)
        if probe is None:
            return None, ActionOutcome(
                notification=_error(failure_title, ERROR_MESSAGES["missing_token"])
            )
        response: ProbeResult = await probe.probe(method, path, body=body)
        if not response.success:
            self.logger.warning(f"{method} {path} failed: {response.error}")
            return None, ActionOutcome(
                notification=_error(
                    failure_title, failure_message(response, ERROR_MESSAGES[failure_key])
                )
            )
        return response, None

    async def seed_test_data(
        self, system: SystemFilter = SystemFilter.ALL, token: Optional[str] = None
    ) -> ActionOutcome:
        system = SystemFilter(system)
        response, failed = await self._admin_call(
            "POST", "/admin/qa/seed", token, "Seeding failed", "seed_failed",
            body={"system": system.value},
        )
        if failed:
            return failed

        self.test_data_seeded = True
        seeded = response.field("seeded")
        return ActionOutcome(
            notification=Notification(
                title="Test data seeded successfully",
                description=(
                    f"Created: {describe_counts(seeded)}"
                    if seeded
                    else f"Test data created for {system.value}"
                ),
            ),
            data={"seeded": seeded, "prefix": SEED_PREFIXES[system.value]},
        )

    async def cleanup_test_data(
        self, system: SystemFilter = SystemFilter.ALL, token: Optional[str] = None
    ) -> ActionOutcome:
        system = SystemFilter(system)
        response, failed = await self._admin_call(
            "DELETE", "/admin/qa/cleanup", token, "Cleanup failed", "cleanup_failed",
            body={"system": system.value},
        )
        if failed:
            return failed

        self.test_data_seeded = False
        cleaned = response.field("cleaned")
        return ActionOutcome(
            notification=Notification(
                title="Test data cleaned successfully",
                description=(
                    f"Deleted: {describe_counts(cleaned)}"
                    if cleaned
                    else "All tagged test data removed"
                ),
            ),
            data={"cleaned": cleaned},
        )

    async def check_test_data_status(self, token: Optional[str] = None) -> ActionOutcome:
        response, failed = await self._admin_call(
            "GET", "/admin/qa/status", token, "Status check failed", "status_failed"
        )
        if failed:
            return failed

        counts = response.field("test_data_counts")
        self.test_data_seeded = bool(response.field("has_test_data"))
        if isinstance(counts, dict):
            description = (
                f"Clients: {counts.get('clients', 0)}, "
                f"Products: {counts.get('products', 0)}, "
                f"Invoices: {counts.get('invoices', 0)}, "
                f"Logs: {counts.get('notification_logs', 0)}"
            )
        else:
            description = "No test data found"
        return ActionOutcome(
            notification=Notification(title="Test Data Status", description=description),
            data={"test_data_counts": counts, "has_test_data": self.test_data_seeded},
        )

    async def run_health_check(self, token: Optional[str] = None) -> ActionOutcome:
        response, failed = await self._admin_call(
            "GET", "/admin/qa/health", token, "Health check failed", "health_failed"
        )
        if failed:
            return failed

        overall = str(response.field("overall_status") or "unknown")
        checks = response.field("checks")
        if not isinstance(checks, dict):
            checks = {}
        database = checks.get("database") or []
        tables = checks.get("tables") or []
        first = database[0] if database and isinstance(database[0], dict) else {}
        db_status = first.get("status", "unknown")
        tables_ok = sum(1 for t in tables if isinstance(t, dict) and t.get("status") == "ok")

        return ActionOutcome(
            notification=Notification(
                title=f"System Health: {overall.upper()}",
                description=f"Database: {db_status}, Tables: {tables_ok} OK",
                variant=(
                    NotificationVariant.DEFAULT
                    if overall == "healthy"
                    else NotificationVariant.DESTRUCTIVE
                ),
            ),
            data=response.data if isinstance(response.data, dict) else None,
        )

    def _run_or_error(self, run: Optional[ConsoleRun], title: str):
        run = run or self.last_run
        if run is None:
            return None, ActionOutcome(
                notification=_error(title, "Run the QA tests before exporting")
            )
        return run, None

    def export_errors(self, run: Optional[ConsoleRun] = None) -> ActionOutcome:
        """Copy the error digest to the clipboard, or to a file when that fails."""
        run, missing = self._run_or_error(run, "Export failed")
        if missing:
            return missing

        digest = format_error_digest(run.health, run.user_mode, run.system)
        try:
            clipboard = copy_to_clipboard(digest, self.export_dir)
        except ExportError as e:
            self.logger.error(str(e))
            return ActionOutcome(notification=_error("Export failed", str(e)))

        if clipboard.copied:
            notification = Notification(
                title="Copied to clipboard",
                description="Error report copied in developer-ready format",
            )
        else:
            notification = Notification(
                title="Clipboard unavailable",
                description=ERROR_MESSAGES["clipboard_failed"].format(
                    path=clipboard.fallback_path
                ),
            )
        return ActionOutcome(
            notification=notification,
            clipboard=clipboard,
            path=clipboard.fallback_path,
            data={"digest": digest},
        )

    def export_report(
        self,
        directory: Optional[Union[str, Path]] = None,
        run: Optional[ConsoleRun] = None,
    ) -> ActionOutcome:
        """Write the JSON snapshot of a run."""
        run, missing = self._run_or_error(run, "Export failed")
        if missing:
            return missing

        snapshot = build_snapshot(run.health, run.user_mode, run.system)
        try:
            path = write_snapshot(snapshot, directory or self.export_dir)
        except ExportError as e:
            self.logger.error(str(e))
            return ActionOutcome(notification=_error("Export failed", str(e)))

        return ActionOutcome(
            notification=Notification(
                title="Report downloaded", description=f"Saved to {path}"
            ),
            path=str(path),
            data=snapshot,
        )

