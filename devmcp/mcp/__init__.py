"""MCP protocol surface: tool registry, catalog and stdio server."""
