"""Tool handler tables, one module per server."""
