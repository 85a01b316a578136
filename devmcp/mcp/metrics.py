import time
import logging
from typing import Optional

from devmcp.core.types import InvocationResult

logger = logging.getLogger("DevMcp.mcp.metrics")


class ToolCallMetrics:
    """
    Tracks duration and payload size of a single tool call.
    """
    def __init__(self, name: str):
        self.name = name
        self.response_chars = 0
        self.saw_error = False
        self.completed = False
        self.started_monotonic = time.monotonic()

    def record_result(self, result: InvocationResult) -> None:
        self.completed = True
        self.response_chars = sum(len(block.text) for block in result.content)
        self.saw_error = result.is_error

    def get_outcome(self) -> str:
        if not self.completed:
            return "no_response"
        return "error" if self.saw_error else "success"

    def elapsed_ms(self) -> float:
        return max(0.0, (time.monotonic() - self.started_monotonic) * 1000.0)

    def log_telemetry(self, warn_threshold_ms: Optional[float] = None) -> None:
        """Log normalized telemetry for the tool call."""
        elapsed_ms = self.elapsed_ms()
        slow = warn_threshold_ms is not None and elapsed_ms >= warn_threshold_ms
        log_method = logger.warning if slow else logger.info
        log_method(
            "Tool call telemetry: name=%s outcome=%s elapsed_ms=%.1f response_chars=%d",
            self.name,
            self.get_outcome(),
            elapsed_ms,
            self.response_chars,
        )
