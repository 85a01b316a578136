"""
devmcp: developer workflow tools over the Model Context Protocol
"""

from devmcp.core.errors import (
    CommandTimeoutError,
    DevMcpError,
    ExternalProcessError,
    InvalidArgumentError,
    MalformedUpstreamDataError,
    RequestFailedError,
    RequestTimeoutError,
    UnknownToolError,
)
from devmcp.mcp.catalog import build_registry
from devmcp.mcp.registry import ToolRegistry
from devmcp.mcp.server import McpServer
from devmcp.version import __version__

__all__ = [
    "__version__",
    "build_registry",
    "McpServer",
    "ToolRegistry",
    "DevMcpError",
    "UnknownToolError",
    "InvalidArgumentError",
    "ExternalProcessError",
    "CommandTimeoutError",
    "RequestFailedError",
    "RequestTimeoutError",
    "MalformedUpstreamDataError",
]
