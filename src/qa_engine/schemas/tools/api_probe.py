# qa_engine/schemas/tools/api_probe.py

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from qa_engine.schemas.core import ToolInput, ToolOutput

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD")


class ProbeRequest(BaseModel):
    """One HTTP call against the API under test."""

    method: str = Field(..., description="HTTP method, e.g. GET, POST, HEAD")
    path: str = Field(..., description="Path relative to the API base URL")
    requires_auth: bool = Field(
        default=True, description="Attach the session bearer token if one exists"
    )
    body: Optional[Any] = Field(default=None, description="JSON request body")
    expected_status: int = Field(default=200, description="Status counted as success")
    timeout_ms: int = Field(default=15000, gt=0, description="Per-call timeout")

    @field_validator("method")
    @classmethod
    def normalize_method(cls, value: str) -> str:
        method = value.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {value}")
        return method


class ProbeResult(BaseModel):
    """Normalized outcome of a probe. Failures are data, never exceptions."""

    success: bool = Field(..., description="Whether the status met the expectation")
    status: int = Field(..., description="HTTP status, 0 when no response arrived")
    data: Optional[Any] = Field(default=None, description="Parsed JSON or raw text")
    error: Optional[str] = Field(default=None, description="Why the probe failed")
    duration_ms: int = Field(default=0, ge=0)

    def field(self, name: str, default: Any = None) -> Any:
        """Read a top-level key from a JSON object body."""
        if isinstance(self.data, dict):
            return self.data.get(name, default)
        return default

    def has_field(self, name: str) -> bool:
        return isinstance(self.data, dict) and name in self.data


class ApiProbeInput(ToolInput):
    request: ProbeRequest = Field(..., description="Details of the HTTP call")


class ApiProbeOutput(ToolOutput):
    result: ProbeResult = Field(..., description="Normalized probe outcome")
