# qa_engine/tools/catalog/context.py

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TYPE_CHECKING

from qa_engine.schemas.tools.test_catalog import RunOptions, TestDefinition
from qa_engine.tools.data_tracker import TestDataTracker

if TYPE_CHECKING:
    from qa_engine.tools.api_probe import ApiProbeTool


@dataclass
class RunContext:
    """What a check's run() receives.

    ``state`` is shared by every check of one run so that lifecycle steps
    (create, then read the created id) can hand values forward.
    """

    definition: TestDefinition
    probe: "ApiProbeTool"
    tracker: TestDataTracker
    token: Optional[str] = None
    options: RunOptions = field(default_factory=RunOptions)
    state: Dict[str, Any] = field(default_factory=dict)
