# qa_engine/schemas/core/results.py

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SystemTag(str, Enum):
    """Subsystem a definition belongs to. SHARED marks cross-cutting services."""

    SMS = "sms"
    QR = "qr"
    INVOICING = "invoicing"
    SHARED = "shared"


class SystemFilter(str, Enum):
    """Selection used to narrow a catalog; ALL is never stored on a definition."""

    SMS = "sms"
    QR = "qr"
    INVOICING = "invoicing"
    SHARED = "shared"
    ALL = "all"


class Component(str, Enum):
    UI = "ui"
    API = "api"
    DB = "db"
    LOGIC = "logic"


class TestStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    WARNING = "warning"
    MISSING = "missing"

    @property
    def is_terminal(self) -> bool:
        return self not in (TestStatus.PENDING, TestStatus.RUNNING)


class Priority(str, Enum):
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"

    @property
    def rank(self) -> int:
        """Higher is more important: P0 -> 2, P2 -> 0."""
        return {"P0": 2, "P1": 1, "P2": 0}[self.value]


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    MISSING = "missing"


class TestCategory(str, Enum):
    API = "api"
    AUTH = "auth"
    CRUD = "crud"
    FRONTEND = "frontend"
    INTEGRATION = "integration"
    SECURITY = "security"
    QA = "qa"


class Bucket(str, Enum):
    WORKING = "working"
    WARNINGS = "warnings"
    ERRORS = "errors"
    MISSING = "missing"
    CROSS_SYSTEM = "crossSystem"


class Verdict(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    PARTIAL = "PARTIAL"
    UNKNOWN = "UNKNOWN"


class TestResult(BaseModel):
    """Outcome of one check. Frozen: build a new result instead of mutating."""

    __test__ = False
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identifier of the check that produced it")
    name: str = Field(..., description="Human readable check name")
    category: TestCategory = Field(default=TestCategory.QA)
    priority: Priority = Field(default=Priority.P1)
    status: TestStatus = Field(..., description="Outcome status")
    duration_ms: int = Field(default=0, ge=0)
    message: Optional[str] = None
    error: Optional[str] = None
    expected: Optional[str] = None
    actual: Optional[str] = None
    root_cause: Optional[str] = None
    fix: Optional[str] = None
    suggested_fix: Optional[str] = Field(
        default=None, description="Remediation for a known, unbuilt capability"
    )
    details: Optional[str] = Field(
        default=None, description="Diagnostics such as a formatted traceback"
    )
    endpoint: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)
    data_created: Optional[Any] = None
    data_deleted: Optional[bool] = None

    # Metadata copied from the owning definition
    system: SystemTag = Field(default=SystemTag.SHARED)
    service: Optional[str] = None
    component: Component = Field(default=Component.API)
    severity: Optional[Severity] = None
    cross_system: bool = Field(
        default=False, description="Whether the check spans two named subsystems"
    )

    def with_status(self, status: TestStatus, **changes: Any) -> "TestResult":
        """Return a copy with a new status; terminal results cannot change."""
        if self.status.is_terminal:
            raise ValueError(
                f"Result {self.id} is already {self.status.value} and cannot change"
            )
        return self.model_copy(update={"status": status, **changes})

    @property
    def is_error(self) -> bool:
        return self.status == TestStatus.FAILED or self.severity == Severity.ERROR


class SystemHealth(BaseModel):
    """Results grouped into the five disjoint health buckets."""

    model_config = ConfigDict(populate_by_name=True)

    working: List[TestResult] = Field(default_factory=list)
    warnings: List[TestResult] = Field(default_factory=list)
    errors: List[TestResult] = Field(default_factory=list)
    missing: List[TestResult] = Field(default_factory=list)
    cross_system: List[TestResult] = Field(
        default_factory=list, alias="crossSystem"
    )

    def bucket(self, bucket: Bucket) -> List[TestResult]:
        return {
            Bucket.WORKING: self.working,
            Bucket.WARNINGS: self.warnings,
            Bucket.ERRORS: self.errors,
            Bucket.MISSING: self.missing,
            Bucket.CROSS_SYSTEM: self.cross_system,
        }[bucket]

    def all_results(self) -> List[TestResult]:
        return [r for bucket in Bucket for r in self.bucket(bucket)]

    @property
    def total(self) -> int:
        return sum(len(self.bucket(bucket)) for bucket in Bucket)

    def summary(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "passed": len(self.working),
            "failed": len(self.errors),
            "warnings": len(self.warnings),
            "missing": len(self.missing),
            "crossSystem": len(self.cross_system),
        }


class TestSuite(BaseModel):
    """A named, timed collection of results with derived counts."""

    __test__ = False

    name: str
    category: TestCategory = TestCategory.QA
    tests: List[TestResult] = Field(default_factory=list)
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    warnings: int = 0


class PlatformHealth(BaseModel):
    """Coarse health flags for the platform under test."""

    api: bool = False
    database: bool = False
    auth: bool = False
    storage: bool = False
    email: bool = False


class CleanupStatus(BaseModel):
    clients_deleted: int = 0
    products_deleted: int = 0
    invoices_deleted: int = 0
    payments_deleted: int = 0
    templates_deleted: int = 0


class TestReport(BaseModel):
    """Top-level aggregate of one or more suites."""

    __test__ = False

    id: str
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    suites: List[TestSuite] = Field(default_factory=list)
    system_health: PlatformHealth = Field(default_factory=PlatformHealth)
    total_tests: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    warnings: int = 0
    missing: int = 0
    coverage: float = Field(default=0.0, ge=0.0, le=1.0)
    verdict: Verdict = Verdict.UNKNOWN
    confidence: int = Field(default=0, ge=0, le=100)
    cleanup_status: Optional[CleanupStatus] = None
