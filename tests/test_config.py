"""Tests for devmcp.core.config: Configuration management."""

from devmcp.core.config import (
    DEFAULT_COMMAND_TIMEOUT_MS,
    DEFAULT_TOOL_RESPONSE_MAX_CHARS,
    DevMcpConfig,
    MySQLConfig,
    PostgresConfig,
    get_config,
    reset_config,
)


class TestDevMcpConfigDefaults:
    def test_from_env_defaults(self):
        config = DevMcpConfig.from_env()
        assert config.postgres.host == "localhost"
        assert config.postgres.port == 5432
        assert config.mysql.port == 3306
        assert config.mysql.user == "root"
        assert config.runtime.command_timeout_ms == DEFAULT_COMMAND_TIMEOUT_MS
        assert config.runtime.follow_timeout_ms == 5000
        assert config.runtime.http_timeout_ms == 30000
        assert config.runtime.tool_response_max_chars == DEFAULT_TOOL_RESPONSE_MAX_CHARS
        assert config.logging.level == "INFO"

    def test_log_dir_from_env(self, tmp_path):
        config = DevMcpConfig.from_env()
        assert config.logging.log_dir == str(tmp_path / "logs")


class TestEnvOverrides:
    def test_database_parameters(self, monkeypatch):
        monkeypatch.setenv("PG_HOST", "db.internal")
        monkeypatch.setenv("PG_PORT", "6543")
        monkeypatch.setenv("MYSQL_DATABASE", "shop")
        config = DevMcpConfig.from_env()
        assert config.postgres.host == "db.internal"
        assert config.postgres.port == 6543
        assert config.mysql.database == "shop"

    def test_runtime_limits(self, monkeypatch):
        monkeypatch.setenv("DEVMCP_COMMAND_TIMEOUT_MS", "1500")
        monkeypatch.setenv("DEVMCP_TOOL_RESPONSE_MAX_CHARS", "100")
        config = DevMcpConfig.from_env()
        assert config.runtime.command_timeout_ms == 1500
        assert config.runtime.tool_response_max_chars == 100

    def test_invalid_number_falls_back_to_default(self, monkeypatch, caplog):
        monkeypatch.setenv("DEVMCP_COMMAND_TIMEOUT_MS", "soon")
        monkeypatch.setenv("DEVMCP_HTTP_TIMEOUT_MS", "-5")
        config = DevMcpConfig.from_env()
        assert config.runtime.command_timeout_ms == DEFAULT_COMMAND_TIMEOUT_MS
        assert config.runtime.http_timeout_ms == 30000
        assert "DEVMCP_COMMAND_TIMEOUT_MS" in caplog.text

    def test_log_level_is_upper_cased(self, monkeypatch):
        monkeypatch.setenv("DEVMCP_LOG_LEVEL", "debug")
        assert DevMcpConfig.from_env().logging.level == "DEBUG"


class TestConnectionUrls:
    def test_postgres_url(self):
        cfg = PostgresConfig(host="h", port=1, database="d", user="u", password="p@ss word")
        assert cfg.url() == "postgresql+psycopg2://u:p%40ss+word@h:1/d"

    def test_mysql_url(self):
        cfg = MySQLConfig(host="h", port=2, database="d", user="root", password="")
        assert cfg.url() == "mysql+pymysql://root:@h:2/d"


def test_get_config_is_cached_until_reset(monkeypatch):
    first = get_config()
    assert get_config() is first
    monkeypatch.setenv("PG_HOST", "elsewhere")
    assert get_config().postgres.host == "localhost"
    reset_config()
    assert get_config().postgres.host == "elsewhere"
