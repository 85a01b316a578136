"""
Tool registry and dispatcher.

A registry is a data-driven table of (descriptor, handler) entries for one
server. Dispatch looks up the entry, checks the arguments against the
declared input shape, runs the handler and always returns exactly one
InvocationResult; exceptions never escape.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Union

from devmcp.analysis.shapes import validate_shape
from devmcp.core.config import get_config
from devmcp.core.errors import DevMcpError, InvalidArgumentError, UnknownToolError
from devmcp.core.types import InvocationResult, TextContent, ToolDescriptor

from .metrics import ToolCallMetrics
from .utils import public_tool_error_message, truncate_tool_text

logger = logging.getLogger("DevMcp.mcp.registry")

HandlerOutput = Union[str, List[TextContent]]
Handler = Callable[[Dict[str, Any]], HandlerOutput]


class RegisteredTool(NamedTuple):
    descriptor: ToolDescriptor
    handler: Handler


class ToolRegistry:
    def __init__(
        self,
        server_name: str,
        *,
        max_response_chars: Optional[int] = None,
        warn_ms: Optional[int] = None,
    ):
        runtime = get_config().runtime
        self.server_name = server_name
        self.max_response_chars = max_response_chars or runtime.tool_response_max_chars
        self.warn_ms = warn_ms or runtime.tool_call_warn_ms
        self._tools: Dict[str, RegisteredTool] = {}

    def register(self, descriptor: ToolDescriptor, handler: Handler) -> None:
        if descriptor.name in self._tools:
            raise ValueError(f"Tool '{descriptor.name}' is already registered on {self.server_name}")
        self._tools[descriptor.name] = RegisteredTool(descriptor, handler)

    def register_all(self, schemas: Iterable[Dict[str, Any]], handlers: Dict[str, Handler]) -> None:
        """Register schema table entries, binding each to the handler of the same name."""
        for schema in schemas:
            name = schema["name"]
            handler = handlers.get(name)
            if handler is None:
                raise ValueError(f"No handler bound for tool '{name}'")
            self.register(
                ToolDescriptor(
                    name=name,
                    description=schema["description"],
                    input_schema=schema["inputSchema"],
                ),
                handler,
            )

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> List[str]:
        return list(self._tools)

    def list_tools(self) -> List[ToolDescriptor]:
        return [entry.descriptor for entry in self._tools.values()]

    def get(self, name: str) -> Optional[RegisteredTool]:
        return self._tools.get(name)

    def dispatch(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> InvocationResult:
        metrics = ToolCallMetrics(name)
        try:
            result = self._invoke(name, arguments)
        except DevMcpError as exc:
            logger.info("Tool '%s' failed: %s", name, exc)
            result = InvocationResult.failure(public_tool_error_message(exc))
        except Exception as exc:
            logger.exception("Tool execution failed: %s", name)
            result = InvocationResult.failure(public_tool_error_message(exc))
        metrics.record_result(result)
        metrics.log_telemetry(self.warn_ms)
        return result

    def _invoke(self, name: str, arguments: Optional[Dict[str, Any]]) -> InvocationResult:
        entry = self._tools.get(name)
        if entry is None:
            raise UnknownToolError(name)
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidArgumentError(f"Invalid arguments for {name}: arguments must be an object")

        problems = validate_shape(arguments, entry.descriptor.input_schema)
        if problems:
            raise InvalidArgumentError(f"Invalid arguments for {name}: " + "; ".join(problems))

        output = entry.handler(arguments)
        if isinstance(output, str):
            return InvocationResult.ok(truncate_tool_text(output, name, self.max_response_chars))
        return InvocationResult.ok(output)
