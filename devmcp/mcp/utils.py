import json
import logging
from typing import Any

logger = logging.getLogger("DevMcp.mcp.utils")

_TRUNCATION_SUFFIX = "\n\n[Response truncated due to size limits]"


def truncate_tool_text(text: str, name: str, max_chars: int) -> str:
    """Apply the response length limit to tool text."""
    if len(text) > max_chars:
        logger.info("Truncating response for tool '%s' (%d -> %d chars)", name, len(text), max_chars)
        cutoff = max(0, max_chars - len(_TRUNCATION_SUFFIX))
        return text[:cutoff] + _TRUNCATION_SUFFIX
    return text


def to_json_text(payload: Any) -> str:
    """Pretty JSON for tool output; values JSON cannot encode (dates, decimals) fall back to str()."""
    return json.dumps(payload, indent=2, default=str)


def public_tool_error_message(error: Exception) -> str:
    """Descriptive text of an error, without traceback or type internals."""
    msg = str(error).strip()
    return msg or type(error).__name__
