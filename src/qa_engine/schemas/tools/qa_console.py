# qa_engine/schemas/tools/qa_console.py

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from qa_engine.schemas.core import SystemFilter, SystemHealth, TestResult
from qa_engine.schemas.tools.test_catalog import UserMode


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notification(BaseModel):
    """Short user-facing message (a toast) describing an action's outcome."""

    title: str
    description: str = ""
    variant: NotificationVariant = NotificationVariant.DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == NotificationVariant.DESTRUCTIVE


class ConsoleRun(BaseModel):
    user_mode: UserMode
    system: SystemFilter
    results: List[TestResult] = Field(default_factory=list)
    health: SystemHealth = Field(default_factory=SystemHealth)
    progress: List[int] = Field(
        default_factory=list, description="Progress percentages in the order emitted"
    )
    tracked_data: Dict[str, List[str]] = Field(default_factory=dict)
    notification: Notification


class ClipboardOutcome(BaseModel):
    copied: bool = Field(..., description="True when the system clipboard took it")
    fallback_path: Optional[str] = Field(
        default=None, description="File holding the text for manual copy"
    )


class ActionOutcome(BaseModel):
    """Result of a console action: the toast plus any payload worth keeping."""

    notification: Notification
    data: Optional[Dict] = None
    clipboard: Optional[ClipboardOutcome] = None
    path: Optional[str] = None
