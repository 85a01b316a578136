"""
devmcp Configuration
--------------------
Centralized configuration for the tool servers, loaded from environment
variables. Database connection parameters keep the PG_* / MYSQL_* names used
by existing .env files.
"""

import os
import logging
from typing import Optional
from urllib.parse import quote_plus

from pydantic import BaseModel, Field

from devmcp.platform import get_log_dir

logger = logging.getLogger("DevMcp.Config")

DEFAULT_COMMAND_TIMEOUT_MS = 60000
DEFAULT_FOLLOW_TIMEOUT_MS = 5000
DEFAULT_HTTP_TIMEOUT_MS = 30000
DEFAULT_TOOL_RESPONSE_MAX_CHARS = 32768
DEFAULT_TOOL_CALL_WARN_MS = 30000


def _parse_positive_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
        if value <= 0:
            raise ValueError
        return value
    except ValueError:
        logger.warning(
            "Invalid %s value '%s'; expected positive integer. Using %d.",
            name,
            raw,
            default,
        )
        return default


class PostgresConfig(BaseModel):
    """PostgreSQL connection parameters."""
    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    user: str = "postgres"
    password: str = ""

    def url(self) -> str:
        return (
            f"postgresql+psycopg2://{quote_plus(self.user)}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class MySQLConfig(BaseModel):
    """MySQL connection parameters."""
    host: str = "localhost"
    port: int = 3306
    database: str = "mysql"
    user: str = "root"
    password: str = ""

    def url(self) -> str:
        return (
            f"mysql+pymysql://{quote_plus(self.user)}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class RuntimeConfig(BaseModel):
    """Deadlines and response limits for tool execution."""
    command_timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS
    follow_timeout_ms: int = DEFAULT_FOLLOW_TIMEOUT_MS
    http_timeout_ms: int = DEFAULT_HTTP_TIMEOUT_MS
    tool_response_max_chars: int = DEFAULT_TOOL_RESPONSE_MAX_CHARS
    tool_call_warn_ms: int = DEFAULT_TOOL_CALL_WARN_MS


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_dir: Optional[str] = None


class DevMcpConfig(BaseModel):
    """Root configuration for all devmcp servers."""
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    mysql: MySQLConfig = Field(default_factory=MySQLConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "DevMcpConfig":
        """
        Load configuration from environment variables.

        - PG_HOST / PG_PORT / PG_DATABASE / PG_USER / PG_PASSWORD
        - MYSQL_HOST / MYSQL_PORT / MYSQL_DATABASE / MYSQL_USER / MYSQL_PASSWORD
        - DEVMCP_COMMAND_TIMEOUT_MS: Default deadline for external commands
        - DEVMCP_FOLLOW_TIMEOUT_MS: Capture window for followed log streams
        - DEVMCP_HTTP_TIMEOUT_MS: Default deadline for HTTP probes
        - DEVMCP_TOOL_RESPONSE_MAX_CHARS: Truncation limit for tool text
        - DEVMCP_TOOL_CALL_WARN_MS: Slow tool call warning threshold
        - DEVMCP_LOG_LEVEL / DEVMCP_LOG_DIR
        """
        return cls(
            postgres=PostgresConfig(
                host=os.environ.get("PG_HOST", "localhost"),
                port=_parse_positive_int_env("PG_PORT", 5432),
                database=os.environ.get("PG_DATABASE", "postgres"),
                user=os.environ.get("PG_USER", "postgres"),
                password=os.environ.get("PG_PASSWORD", ""),
            ),
            mysql=MySQLConfig(
                host=os.environ.get("MYSQL_HOST", "localhost"),
                port=_parse_positive_int_env("MYSQL_PORT", 3306),
                database=os.environ.get("MYSQL_DATABASE", "mysql"),
                user=os.environ.get("MYSQL_USER", "root"),
                password=os.environ.get("MYSQL_PASSWORD", ""),
            ),
            runtime=RuntimeConfig(
                command_timeout_ms=_parse_positive_int_env(
                    "DEVMCP_COMMAND_TIMEOUT_MS", DEFAULT_COMMAND_TIMEOUT_MS
                ),
                follow_timeout_ms=_parse_positive_int_env(
                    "DEVMCP_FOLLOW_TIMEOUT_MS", DEFAULT_FOLLOW_TIMEOUT_MS
                ),
                http_timeout_ms=_parse_positive_int_env(
                    "DEVMCP_HTTP_TIMEOUT_MS", DEFAULT_HTTP_TIMEOUT_MS
                ),
                tool_response_max_chars=_parse_positive_int_env(
                    "DEVMCP_TOOL_RESPONSE_MAX_CHARS", DEFAULT_TOOL_RESPONSE_MAX_CHARS
                ),
                tool_call_warn_ms=_parse_positive_int_env(
                    "DEVMCP_TOOL_CALL_WARN_MS", DEFAULT_TOOL_CALL_WARN_MS
                ),
            ),
            logging=LoggingConfig(
                level=os.environ.get("DEVMCP_LOG_LEVEL", "INFO").upper(),
                log_dir=str(get_log_dir()),
            ),
        )


_CONFIG: Optional[DevMcpConfig] = None


def get_config() -> DevMcpConfig:
    """Process-wide configuration, loaded from the environment on first use."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = DevMcpConfig.from_env()
    return _CONFIG


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _CONFIG
    _CONFIG = None
