# qa_engine/app/api/dto/qa_dto.py

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from qa_engine.schemas.core import SystemFilter, SystemHealth, TestResult
from qa_engine.schemas.tools.qa_console import ClipboardOutcome, Notification
from qa_engine.schemas.tools.test_catalog import UserMode


class ConsoleRunRequest(BaseModel):
    """Request for a QA console run."""

    system: SystemFilter = Field(SystemFilter.ALL, description="Subsystem to test")
    user_mode: UserMode = Field(UserMode.ADMIN, description="Console user mode")
    live_sms_mode: bool = Field(False, description="Actually send SMS")
    token: Optional[str] = Field(
        None, description="Session token; the configured store is used when unset"
    )


class ConsoleRunResponse(BaseModel):
    system: SystemFilter
    user_mode: UserMode
    summary: Dict[str, int] = Field(..., description="Counts per bucket")
    health: SystemHealth
    results: List[TestResult] = Field(default_factory=list)
    progress: List[int] = Field(default_factory=list)
    tracked_data: Dict[str, List[str]] = Field(default_factory=dict)
    notification: Notification


class FullRunRequest(BaseModel):
    """Request for a full-system run."""

    token: Optional[str] = Field(None, description="Session token")
    include_dependencies: bool = Field(
        True, description="Add the page dependency suite"
    )


class DependencyRequest(BaseModel):
    check_endpoints: bool = Field(
        False, description="Also HEAD-probe the GET endpoints each page uses"
    )


class TestDataRequest(BaseModel):
    """Request for seeding or cleaning tagged test data."""

    __test__ = False

    system: SystemFilter = Field(SystemFilter.ALL)
    token: Optional[str] = Field(None, description="Session token")


class ActionResponse(BaseModel):
    """Outcome of a console action, rendered as a toast by clients."""

    notification: Notification
    data: Optional[Dict[str, Any]] = None
    clipboard: Optional[ClipboardOutcome] = None
    path: Optional[str] = None
