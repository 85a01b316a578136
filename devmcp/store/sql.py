"""
SQL engine handles.

One SQLAlchemy engine (and therefore one connection pool) per supported
engine type, created on first use and kept for the lifetime of the process.
There is no explicit teardown; process exit reclaims the pools.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from devmcp.core.config import DevMcpConfig, get_config
from devmcp.core.errors import DatabaseError, InvalidArgumentError

logger = logging.getLogger("DevMcp.store.sql")

SUPPORTED_DB_TYPES = ("postgres", "mysql")


def _describe_error(exc: SQLAlchemyError) -> str:
    original = getattr(exc, "orig", None)
    return str(original).strip() if original is not None else str(exc).strip()


def _statement_command(sql: str) -> str:
    words = sql.strip().split(None, 1)
    return words[0].upper() if words else ""


class SqlEngines:
    """Lazily created engines keyed by db type; creation is guarded so concurrent first calls build one pool."""

    def __init__(
        self,
        config: Optional[DevMcpConfig] = None,
        engine_factory: Callable[..., Engine] = create_engine,
    ):
        self._config = config
        self._engine_factory = engine_factory
        self._engines: Dict[str, Engine] = {}
        self._lock = threading.Lock()

    def _url_for(self, db_type: str) -> str:
        config = self._config or get_config()
        if db_type == "postgres":
            return config.postgres.url()
        return config.mysql.url()

    def get(self, db_type: str) -> Engine:
        if db_type not in SUPPORTED_DB_TYPES:
            raise InvalidArgumentError(
                f"Unsupported dbType '{db_type}'; expected one of {', '.join(SUPPORTED_DB_TYPES)}"
            )
        engine = self._engines.get(db_type)
        if engine is not None:
            return engine
        with self._lock:
            engine = self._engines.get(db_type)
            if engine is None:
                logger.info("Creating %s connection pool", db_type)
                engine = self._engine_factory(self._url_for(db_type), pool_pre_ping=True)
                self._engines[db_type] = engine
        return engine

    def execute_raw(self, db_type: str, sql: str) -> Dict[str, Any]:
        """Run caller SQL verbatim (no bind-parameter parsing) and return rows plus counts."""
        engine = self.get(db_type)
        try:
            with engine.begin() as conn:
                result = conn.exec_driver_sql(sql, execution_options={"no_parameters": True})
                if result.returns_rows:
                    rows = [dict(row) for row in result.mappings()]
                    row_count = len(rows)
                else:
                    rows = []
                    row_count = result.rowcount
        except SQLAlchemyError as exc:
            raise DatabaseError(f"{db_type} query failed: {_describe_error(exc)}") from exc
        return {"rows": rows, "rowCount": row_count, "command": _statement_command(sql)}

    def fetch_all(
        self,
        db_type: str,
        sql: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Run one of our own parameterized statements and return its rows as dicts."""
        engine = self.get(db_type)
        try:
            with engine.connect() as conn:
                result = conn.execute(text(sql), dict(params or {}))
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as exc:
            raise DatabaseError(f"{db_type} query failed: {_describe_error(exc)}") from exc


_ENGINES: Optional[SqlEngines] = None
_ENGINES_LOCK = threading.Lock()


def get_sql_engines() -> SqlEngines:
    """Process-wide engine handles."""
    global _ENGINES
    with _ENGINES_LOCK:
        if _ENGINES is None:
            _ENGINES = SqlEngines()
        return _ENGINES
