# qa_engine/tools/catalog/helpers.py

import random
import string
import time
from typing import Any, Optional

from qa_engine.config.constants import TEST_EMAIL_DOMAIN, TEST_NAME_PREFIX
from qa_engine.schemas.tools.api_probe import ProbeResult


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_test_name(prefix: str) -> str:
    """Name for a throwaway entity, e.g. "[TEST] Client_1718000000000"."""
    return f"{TEST_NAME_PREFIX} {prefix}_{_now_ms()}"


def generate_test_email() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"test_{_now_ms()}_{suffix}@{TEST_EMAIL_DOMAIN}"


def failure_message(result: ProbeResult, default: str) -> str:
    """Prefer the backend's own ``message`` over a generic one."""
    message = result.field("message")
    if isinstance(message, str) and message.strip():
        return message
    return default


def list_count(result: ProbeResult) -> int:
    """Length of a paginated ``data`` list, 0 when the shape is unexpected."""
    items = result.field("data")
    return len(items) if isinstance(items, list) else 0


def extract_id(result: ProbeResult, key: str) -> Optional[str]:
    """Pull the created entity id out of ``{key: {id}}``, ``{data: {id}}`` or ``{id}``."""
    for candidate in (result.field(key), result.field("data"), result.data):
        if isinstance(candidate, dict) and candidate.get("id") is not None:
            return str(candidate["id"])
    return None


def status_text(result: ProbeResult) -> str:
    return f"Status {result.status}"


def describe_counts(counts: Any) -> str:
    """Render ``{"clients": 3, "invoices": 2}`` as "clients: 3, invoices: 2"."""
    if not isinstance(counts, dict):
        return ""
    return ", ".join(f"{k}: {v}" for k, v in counts.items())
