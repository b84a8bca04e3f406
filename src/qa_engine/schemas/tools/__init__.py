# qa_engine/schemas/tools/__init__.py

from qa_engine.schemas.tools.api_probe import (
    ApiProbeInput,
    ApiProbeOutput,
    ProbeRequest,
    ProbeResult,
)
from qa_engine.schemas.tools.test_catalog import (
    CatalogEntry,
    RunOptions,
    TestDefinition,
    UserMode,
)
from qa_engine.schemas.tools.dependency_verifier import (
    CoreGroupResult,
    DependencyType,
    DependencyVerifierInput,
    DependencyVerifierOutput,
    EndpointCheck,
    FileDependency,
    PageDependencyMap,
    PageManifest,
    PageStatus,
    PageVerificationResult,
)
from qa_engine.schemas.tools.test_executor import (
    ExecutorState,
    ProgressUpdate,
    TestExecutorInput,
    TestExecutorOutput,
)
from qa_engine.schemas.tools.test_reporter import TestReporterInput, TestReporterOutput
from qa_engine.schemas.tools.qa_console import (
    ActionOutcome,
    ClipboardOutcome,
    ConsoleRun,
    Notification,
    NotificationVariant,
)

__all__ = [
    "ApiProbeInput",
    "ApiProbeOutput",
    "ProbeRequest",
    "ProbeResult",
    "CatalogEntry",
    "RunOptions",
    "TestDefinition",
    "UserMode",
    "CoreGroupResult",
    "DependencyType",
    "DependencyVerifierInput",
    "DependencyVerifierOutput",
    "EndpointCheck",
    "FileDependency",
    "PageDependencyMap",
    "PageManifest",
    "PageStatus",
    "PageVerificationResult",
    "ExecutorState",
    "ProgressUpdate",
    "TestExecutorInput",
    "TestExecutorOutput",
    "TestReporterInput",
    "TestReporterOutput",
    "ActionOutcome",
    "ClipboardOutcome",
    "ConsoleRun",
    "Notification",
    "NotificationVariant",
]
