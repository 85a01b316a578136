"""
devmcp Core Types
-----------------
Pydantic models and enums shared by the tool runtime, the analysis helpers
and the tool handlers.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from devmcp.core.errors import ExternalProcessError


class TextContent(BaseModel):
    """A single text content block of a tool result."""
    type: Literal["text"] = "text"
    text: str


class ToolDescriptor(BaseModel):
    """Static advertisement of one tool: name, description and input shape."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class InvocationResult(BaseModel):
    """Uniform envelope around every tool invocation outcome."""
    content: List[TextContent]
    is_error: bool = False

    @classmethod
    def ok(cls, output: Union[str, List[TextContent]]) -> "InvocationResult":
        if isinstance(output, str):
            return cls(content=[TextContent(text=output)])
        return cls(content=list(output))

    @classmethod
    def failure(cls, message: str) -> "InvocationResult":
        return cls(content=[TextContent(text=f"Error: {message}")], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"content": [block.model_dump() for block in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload


class CommandOutcome(BaseModel):
    """Captured result of one external command."""
    command: str
    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def raise_for_status(self) -> "CommandOutcome":
        """Raise ExternalProcessError when the command exited non-zero."""
        if self.timed_out or self.ok:
            return self
        detail = self.stderr.strip() or self.stdout.strip() or "no output"
        raise ExternalProcessError(
            f"Command failed (exit code {self.returncode}): {self.command}\n{detail}",
            returncode=self.returncode,
            stderr=self.stderr,
        )


class BlameLine(BaseModel):
    """Attribution of one source line.

    Attribution fields stay None when the content line appeared before any
    commit header in the blame stream.
    """
    line_number: Optional[int] = None
    commit_hash: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    content: str


class ChangeStatus(str, Enum):
    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    RENAMED = "Renamed"
    OTHER = "Other"


class ChangeRecord(BaseModel):
    status: ChangeStatus
    path: str
    code: str


class CommitSuggestion(BaseModel):
    type: str
    summary: str
    body: str

    @property
    def headline(self) -> str:
        return f"{self.type}: {self.summary}"


class HttpResponse(BaseModel):
    """Normalized response of one timed HTTP request."""
    status: int
    status_text: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None
    duration_ms: int = 0

    def to_payload(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "statusText": self.status_text,
            "headers": self.headers,
            "body": self.body,
            "duration": self.duration_ms,
        }


class RequestTiming(BaseModel):
    duration_ms: Optional[int] = None
    succeeded: bool
    error: Optional[str] = None


class PerformanceStats(BaseModel):
    """Aggregate of repeated request timings, in issuance order."""
    count: int
    success_count: int
    failure_count: int
    average_ms: Optional[float] = None
    min_ms: Optional[int] = None
    max_ms: Optional[int] = None
    durations: List[int] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "totalRequests": self.count,
            "successfulRequests": self.success_count,
            "failedRequests": self.failure_count,
            "averageTime": self.average_ms,
            "minTime": self.min_ms,
            "maxTime": self.max_ms,
            "times": self.durations,
            "errors": self.errors,
        }
