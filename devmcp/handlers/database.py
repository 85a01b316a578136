"""
Database handlers for PostgreSQL and MySQL.

Caller queries run verbatim through SqlEngines.execute_raw; the schema and
statistics queries are our own and bind the table name as a parameter.
"""

import re
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from devmcp.core.errors import InvalidArgumentError
from devmcp.mcp.utils import to_json_text
from devmcp.store.sql import SUPPORTED_DB_TYPES, SqlEngines, get_sql_engines

logger = logging.getLogger("DevMcp.handlers.database")

SCHEMA_TABLES_SQL = {
    "postgres": """
        SELECT
          table_name,
          (SELECT COUNT(*) FROM information_schema.columns c
           WHERE c.table_name = t.table_name AND c.table_schema = 'public') AS column_count
        FROM information_schema.tables t
        WHERE table_schema = 'public' AND table_type = 'BASE TABLE'
        ORDER BY table_name
    """,
    "mysql": """
        SELECT
          TABLE_NAME AS table_name,
          (SELECT COUNT(*) FROM information_schema.COLUMNS c
           WHERE c.TABLE_NAME = t.TABLE_NAME AND c.TABLE_SCHEMA = DATABASE()) AS column_count
        FROM information_schema.TABLES t
        WHERE TABLE_SCHEMA = DATABASE() AND TABLE_TYPE = 'BASE TABLE'
        ORDER BY TABLE_NAME
    """,
}

SCHEMA_COLUMNS_SQL = {
    "postgres": """
        SELECT
          column_name, data_type, character_maximum_length,
          is_nullable, column_default
        FROM information_schema.columns
        WHERE table_schema = 'public' AND table_name = :table_name
        ORDER BY ordinal_position
    """,
    "mysql": """
        SELECT
          COLUMN_NAME AS column_name,
          DATA_TYPE AS data_type,
          CHARACTER_MAXIMUM_LENGTH AS character_maximum_length,
          IS_NULLABLE AS is_nullable,
          COLUMN_DEFAULT AS column_default
        FROM information_schema.COLUMNS
        WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = :table_name
        ORDER BY ORDINAL_POSITION
    """,
}

TABLE_STATS_SQL = {
    "postgres": """
        SELECT
          schemaname,
          relname AS tablename,
          pg_size_pretty(pg_total_relation_size(relid)) AS size,
          n_live_tup AS row_count
        FROM pg_stat_user_tables
        ORDER BY pg_total_relation_size(relid) DESC
    """,
    "mysql": """
        SELECT
          TABLE_NAME AS table_name,
          ROUND(((DATA_LENGTH + INDEX_LENGTH) / 1024 / 1024), 2) AS size_mb,
          TABLE_ROWS AS row_count
        FROM information_schema.TABLES
        WHERE TABLE_SCHEMA = DATABASE()
        ORDER BY (DATA_LENGTH + INDEX_LENGTH) DESC
    """,
}

MIGRATION_TEMPLATE = """-- Migration: {description}
-- Created: {created}
-- Database: {db_type}

-- Up Migration
BEGIN;

-- Add your migration SQL here

COMMIT;

-- Down Migration (Rollback)
BEGIN;

-- Add your rollback SQL here

COMMIT;
"""


def _db_type(args: Dict[str, Any]) -> str:
    db_type = args["dbType"]
    if db_type not in SUPPORTED_DB_TYPES:
        raise InvalidArgumentError(
            f"Unsupported dbType '{db_type}'; expected one of {', '.join(SUPPORTED_DB_TYPES)}"
        )
    return db_type


def render_migration(db_type: str, description: str, now: Optional[datetime] = None):
    """Return (file name, template) for an empty up/down migration."""
    now = now or datetime.now(timezone.utc)
    created = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    stamp = re.sub(r"[-:]", "", created).split(".")[0]
    slug = re.sub(r"\s+", "_", description.lower())
    file_name = f"{stamp}_{slug}.sql"
    return file_name, MIGRATION_TEMPLATE.format(description=description, created=created, db_type=db_type)


class DatabaseTools:
    """Tool handlers bound to one set of engine handles."""

    def __init__(self, engines: Optional[SqlEngines] = None):
        self._engines = engines

    @property
    def engines(self) -> SqlEngines:
        # Resolved on first use so listing tools never touches a database.
        if self._engines is None:
            self._engines = get_sql_engines()
        return self._engines

    def execute_query(self, args: Dict[str, Any]) -> str:
        result = self.engines.execute_raw(_db_type(args), args["query"])
        logger.info("Executed %s on %s (%s rows)", result["command"], args["dbType"], result["rowCount"])
        return to_json_text(result)

    def get_schema(self, args: Dict[str, Any]) -> str:
        db_type = _db_type(args)
        table_name = args.get("tableName")
        if table_name:
            rows = self.engines.fetch_all(db_type, SCHEMA_COLUMNS_SQL[db_type], {"table_name": table_name})
        else:
            rows = self.engines.fetch_all(db_type, SCHEMA_TABLES_SQL[db_type])
        return to_json_text(rows)

    def get_table_stats(self, args: Dict[str, Any]) -> str:
        db_type = _db_type(args)
        return to_json_text(self.engines.fetch_all(db_type, TABLE_STATS_SQL[db_type]))

    def generate_migration(self, args: Dict[str, Any]) -> str:
        file_name, template = render_migration(_db_type(args), args["description"])
        return f"Migration file generated: {file_name}\n\n{template}"

    def handlers(self) -> Dict[str, Callable[[Dict[str, Any]], str]]:
        return {
            "execute_query": self.execute_query,
            "get_schema": self.get_schema,
            "get_table_stats": self.get_table_stats,
            "generate_migration": self.generate_migration,
        }
