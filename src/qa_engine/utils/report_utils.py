# qa_engine/utils/report_utils.py

"""Utility functions for exporting QA results."""

import json
import shutil
import subprocess
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from qa_engine.common.errors import ExportError
from qa_engine.common.logger import LoggerFactory, LoggerType
from qa_engine.config.constants import (
    DIGEST_FALLBACK_FILENAME_TEMPLATE,
    ERROR_MESSAGES,
    SNAPSHOT_FILENAME_TEMPLATE,
)
from qa_engine.schemas.core import SystemHealth, TestReport, TestResult, TestStatus
from qa_engine.schemas.tools.qa_console import ClipboardOutcome

logger = LoggerFactory.get_logger(name="report_utils", logger_type=LoggerType.STANDARD)

# Tried in order; the first one on PATH is used
CLIPBOARD_COMMANDS = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]


def _value(enum_or_str: Any) -> str:
    return getattr(enum_or_str, "value", enum_or_str)


def _iso(moment: Optional[datetime]) -> str:
    return (moment or datetime.now(timezone.utc)).isoformat()


def format_error_entry(result: TestResult) -> str:
    """One digest entry; optional lines are left out when empty."""
    lines = [
        f"SYSTEM: {result.system.value.upper()}",
        f"SERVICE: {result.service}" if result.service else None,
        f"COMPONENT: {result.component.value.upper()}",
        f"ERROR: {result.message}",
        f"ENDPOINT: {result.endpoint}" if result.endpoint else None,
        f"FIX: {result.suggested_fix}" if result.suggested_fix else None,
        "---",
    ]
    return "\n".join(line for line in lines if line)


def format_error_digest(
    health: SystemHealth,
    user_mode: Any,
    system: Any,
    generated_at: Optional[datetime] = None,
) -> str:
    """Plain-text digest of everything that is not working, for bug reports."""
    sections = [
        ("--- ERRORS ---", health.errors),
        ("--- MISSING/NOT IMPLEMENTED ---", health.missing),
        ("--- CROSS-SYSTEM CONFLICTS ---", health.cross_system),
        ("--- WARNINGS ---", health.warnings),
    ]
    lines: List[str] = [
        "=== QA DEBUG CONSOLE ERROR REPORT ===",
        f"Generated: {_iso(generated_at)}",
        f"User Mode: {_value(user_mode)}",
        f"System: {_value(system)}",
    ]
    for header, results in sections:
        lines += ["", header]
        lines += [format_error_entry(r) for r in results]
    return "\n".join(lines)


def build_snapshot(
    health: SystemHealth,
    user_mode: Any,
    system: Any,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Full structured record of a console run."""
    return {
        "timestamp": _iso(generated_at),
        "userMode": _value(user_mode),
        "selectedSystem": _value(system),
        "summary": health.summary(),
        "results": health.model_dump(mode="json", by_alias=True),
    }


def snapshot_filename(day: Optional[Union[date, datetime]] = None) -> str:
    day = day or datetime.now(timezone.utc)
    return SNAPSHOT_FILENAME_TEMPLATE.format(date=day.strftime("%Y-%m-%d"))


def dump_json(payload: Any) -> str:
    """
    Raises:
        ExportError: The payload is not JSON serializable
    """
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ExportError(ERROR_MESSAGES["export_failed"].format(error=e)) from e


def write_snapshot(
    snapshot: Dict[str, Any],
    directory: Union[str, Path],
    filename: Optional[str] = None,
) -> Path:
    """Write a snapshot as pretty JSON and return its path.

    Raises:
        ExportError: Serialization or the write failed
    """
    content = dump_json(snapshot)
    target = Path(directory) / (filename or snapshot_filename())
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ExportError(ERROR_MESSAGES["export_failed"].format(error=e)) from e
    logger.info(f"Snapshot written to {target}")
    return target


def _clipboard_command() -> Optional[List[str]]:
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]):
            return command
    return None


def copy_to_clipboard(
    text: str, fallback_dir: Union[str, Path], timeout: float = 5.0
) -> ClipboardOutcome:
    """Put text on the system clipboard, or write it to a file for manual copy.

    The text is never dropped: when no clipboard tool works it lands in
    ``fallback_dir`` and the outcome carries that path.

    Raises:
        ExportError: Neither the clipboard nor the fallback file worked
    """
    command = _clipboard_command()
    if command is not None:
        try:
            subprocess.run(
                command, input=text.encode("utf-8"), check=True, timeout=timeout
            )
            return ClipboardOutcome(copied=True)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Clipboard command {command[0]} failed: {e}")

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    target = Path(fallback_dir) / DIGEST_FALLBACK_FILENAME_TEMPLATE.format(timestamp=timestamp)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ExportError(ERROR_MESSAGES["export_failed"].format(error=e)) from e
    logger.info(ERROR_MESSAGES["clipboard_failed"].format(path=target))
    return ClipboardOutcome(copied=False, fallback_path=str(target))


_STATUS_ICONS = {
    TestStatus.PASSED: "✅",
    TestStatus.FAILED: "❌",
    TestStatus.WARNING: "⚠️",
    TestStatus.MISSING: "🚧",
}

_BOX_WIDTH = 62


def _box_line(text: str = "") -> str:
    return f"║ {text.ljust(_BOX_WIDTH - 1)}║"


def generate_text_report(report: TestReport) -> str:
    """Human readable rendering of a full report."""
    rule = "═" * _BOX_WIDTH
    health = report.system_health

    def flag(ok: bool) -> str:
        return "✅" if ok else "❌"

    lines = [
        f"╔{rule}╗",
        _box_line("AUTOMATED SYSTEM TEST REPORT".center(_BOX_WIDTH - 2)),
        f"╠{rule}╣",
        _box_line(f"Report ID: {report.id}"),
        _box_line(f"Started: {report.start_time.isoformat()}"),
        _box_line(
            f"Completed: {report.end_time.isoformat() if report.end_time else 'In Progress'}"
        ),
        f"╠{rule}╣",
        _box_line(f"VERDICT: {report.verdict.value}"),
        _box_line(f"Confidence: {report.confidence}%"),
        _box_line(f"Coverage: {round(report.coverage * 100)}%"),
        f"╠{rule}╣",
        _box_line(f"Total Tests: {report.total_tests}"),
        _box_line(f"Passed: {report.passed}"),
        _box_line(f"Failed: {report.failed}"),
        _box_line(f"Warnings: {report.warnings}"),
        _box_line(f"Missing: {report.missing}"),
        _box_line(f"Skipped: {report.skipped}"),
        f"╠{rule}╣",
        _box_line("SYSTEM HEALTH"),
        _box_line(f"API: {flag(health.api)}"),
        _box_line(f"Database: {flag(health.database)}"),
        _box_line(f"Auth: {flag(health.auth)}"),
        _box_line(f"Storage: {flag(health.storage)}"),
        _box_line(f"Email: {flag(health.email)}"),
        f"╚{rule}╝",
        "",
    ]

    for suite in report.suites:
        lines += [
            "",
            f"━━━ {suite.name} ({suite.category.value.upper()}) ━━━",
            f"Passed: {suite.passed} | Failed: {suite.failed} | Warnings: {suite.warnings}",
            "",
        ]
        for test in suite.tests:
            icon = _STATUS_ICONS.get(test.status, "⏭️")
            lines.append(f"{icon} {test.name} ({test.duration_ms}ms)")
            if test.message:
                lines.append(f"   {test.message}")
            if test.error:
                lines.append(f"   ERROR: {test.error}")
            if test.root_cause:
                lines.append(f"   ROOT CAUSE: {test.root_cause}")
            if test.fix:
                lines.append(f"   FIX: {test.fix}")

    if report.cleanup_status is not None:
        cleanup = report.cleanup_status
        lines += [
            "",
            "━━━ CLEANUP ━━━",
            f"Clients: {cleanup.clients_deleted} | Products: {cleanup.products_deleted} | "
            f"Invoices: {cleanup.invoices_deleted} | Templates: {cleanup.templates_deleted}",
        ]

    return "\n".join(lines) + "\n"


def generate_json_report(report: TestReport) -> str:
    return dump_json(report.model_dump(mode="json"))
