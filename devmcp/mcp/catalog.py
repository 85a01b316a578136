"""
Server catalog: which schema table and handler table make up each server.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from devmcp.handlers import api_testing, devtools, git
from devmcp.handlers.database import DatabaseTools
from devmcp.store.sql import SqlEngines

from .definitions import API_TESTING_TOOLS, DATABASE_TOOLS, DEVTOOLS_TOOLS, GIT_TOOLS
from .registry import ToolRegistry

logger = logging.getLogger("DevMcp.mcp.catalog")

HandlerTable = Dict[str, Callable[[Dict[str, Any]], str]]

SERVER_NAMES = {
    "git": "git-server",
    "devtools": "devtools-server",
    "api-testing": "api-testing-server",
    "database": "database-server",
    "all": "devmcp",
}

COMPONENTS = ("git", "devtools", "api-testing", "database")


def _component(name: str, engines: Optional[SqlEngines]) -> Tuple[List[Dict[str, Any]], HandlerTable]:
    if name == "git":
        return GIT_TOOLS, git.HANDLERS
    if name == "devtools":
        return DEVTOOLS_TOOLS, devtools.HANDLERS
    if name == "api-testing":
        return API_TESTING_TOOLS, api_testing.HANDLERS
    return DATABASE_TOOLS, DatabaseTools(engines).handlers()


def build_registry(server: str, *, engines: Optional[SqlEngines] = None, **registry_kwargs) -> ToolRegistry:
    """Build the registry for one server kind, or every tool for ``all``."""
    if server not in SERVER_NAMES:
        raise ValueError(f"Unknown server '{server}'; expected one of {', '.join(SERVER_NAMES)}")
    registry = ToolRegistry(SERVER_NAMES[server], **registry_kwargs)
    parts = COMPONENTS if server == "all" else (server,)
    for part in parts:
        schemas, handlers = _component(part, engines)
        registry.register_all(schemas, handlers)
    logger.debug("Built %s with %d tools", registry.server_name, len(registry))
    return registry
