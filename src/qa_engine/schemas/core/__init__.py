# qa_engine/schemas/core/__init__.py

from qa_engine.schemas.core.base_tool import ToolInput, ToolOutput
from qa_engine.schemas.core.results import (
    Bucket,
    CleanupStatus,
    Component,
    PlatformHealth,
    Priority,
    Severity,
    SystemFilter,
    SystemHealth,
    SystemTag,
    TestCategory,
    TestReport,
    TestResult,
    TestStatus,
    TestSuite,
    Verdict,
    utc_now,
)

__all__ = [
    "ToolInput",
    "ToolOutput",
    "Bucket",
    "CleanupStatus",
    "Component",
    "PlatformHealth",
    "Priority",
    "Severity",
    "SystemFilter",
    "SystemHealth",
    "SystemTag",
    "TestCategory",
    "TestReport",
    "TestResult",
    "TestStatus",
    "TestSuite",
    "Verdict",
    "utc_now",
]
