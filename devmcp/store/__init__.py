from .sql import SqlEngines, get_sql_engines

__all__ = ["SqlEngines", "get_sql_engines"]
