# qa_engine/schemas/tools/dependency_verifier.py

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from qa_engine.schemas.core import ToolInput, ToolOutput


class DependencyType(str, Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    CONFIG = "config"
    MODEL = "model"
    HOOK = "hook"
    SERVICE = "service"
    COMPONENT = "component"
    MIDDLEWARE = "middleware"
    ASSET = "asset"


class FileDependency(BaseModel):
    path: str = Field(..., description="Project-relative file path")
    type: DependencyType
    required: bool = True
    description: str = ""


class PageDependencyMap(BaseModel):
    """Everything one page needs; backend and DB names are informational."""

    page_name: str
    page_url: str
    frontend_file: str
    description: str = ""
    dependencies: List[FileDependency] = Field(default_factory=list)
    api_endpoints: List[str] = Field(default_factory=list)
    backend_controllers: List[str] = Field(default_factory=list)
    database_tables: List[str] = Field(default_factory=list)


class PageManifest(BaseModel):
    """Static, build-time table of pages and the files they rely on."""

    core: List[FileDependency] = Field(default_factory=list)
    pages: List[PageDependencyMap] = Field(default_factory=list)


class PageStatus(str, Enum):
    PASSED = "passed"
    PARTIAL = "partial"
    FAILED = "failed"


class EndpointCheck(BaseModel):
    endpoint: str = Field(..., description='Declared endpoint, e.g. "GET /clients"')
    reachable: bool
    status: Optional[int] = Field(default=None, description="HEAD status if probed")


class PageVerificationResult(BaseModel):
    page_name: str
    page_url: str
    total_dependencies: int
    verified_dependencies: int
    missing_dependencies: List[FileDependency] = Field(
        default_factory=list, description="Required dependencies that did not resolve"
    )
    pass_rate: int = Field(..., ge=0, le=100)
    status: PageStatus
    route_registered: bool
    endpoint_checks: List[EndpointCheck] = Field(default_factory=list)


class CoreGroupResult(BaseModel):
    """Verification of the application-wide files of one dependency type."""

    group: DependencyType
    total_dependencies: int
    verified_dependencies: int
    missing_dependencies: List[FileDependency] = Field(default_factory=list)
    pass_rate: int = Field(..., ge=0, le=100)
    status: PageStatus


class DependencyVerifierInput(ToolInput):
    page_urls: Optional[List[str]] = Field(
        default=None, description="Restrict verification to these pages"
    )
    check_endpoints: bool = Field(
        default=False, description="Also HEAD-probe each page's GET endpoints"
    )
    include_core: bool = Field(
        default=True, description="Also verify the application-wide core files"
    )
    max_concurrency: Optional[int] = Field(
        default=None, gt=0, description="Pages verified at the same time"
    )


class DependencyVerifierOutput(ToolOutput):
    core: List[CoreGroupResult] = Field(
        default_factory=list, description="Core files grouped by dependency type"
    )
    pages: List[PageVerificationResult] = Field(default_factory=list)
    routes: Dict[str, bool] = Field(
        default_factory=dict, description="Critical route -> registered"
    )
    summary: Dict[str, int] = Field(default_factory=dict)
