"""
devmcp exceptions.

Every failure a tool handler can raise derives from DevMcpError. The
dispatcher converts these into error envelopes using the exception message
only, so messages must be human-readable and self-contained.
"""

from __future__ import annotations

from typing import Optional


class DevMcpError(RuntimeError):
    """Base class for tool runtime errors."""


class UnknownToolError(DevMcpError):
    """Raised when a call names a tool that is not in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidArgumentError(DevMcpError):
    """Raised when tool arguments are missing or malformed."""


class ExternalProcessError(DevMcpError):
    """Raised when an external command cannot be spawned or exits non-zero."""

    def __init__(
        self,
        detail: str,
        *,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(detail)


class CommandTimeoutError(DevMcpError):
    """Raised when an external command exceeds its deadline."""

    def __init__(self, command: str, timeout_ms: int) -> None:
        self.command = command
        self.timeout_ms = timeout_ms
        super().__init__(f"Command timed out after {timeout_ms}ms: {command}")


class RequestFailedError(DevMcpError):
    """Raised when an HTTP request fails at the transport level."""


class RequestTimeoutError(DevMcpError):
    """Raised when an HTTP request is aborted at its deadline."""

    def __init__(self, url: str, timeout_ms: int) -> None:
        self.url = url
        self.timeout_ms = timeout_ms
        super().__init__(f"Request to {url} aborted after {timeout_ms}ms")


class MalformedUpstreamDataError(DevMcpError):
    """Raised when upstream data (JSON bodies, config files) cannot be parsed."""


class DatabaseError(DevMcpError):
    """Raised when a SQL engine rejects a query or cannot be reached."""
