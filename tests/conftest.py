import pytest

from devmcp.core import config as config_module

_ENV_VARS = (
    "DEVMCP_COMMAND_TIMEOUT_MS",
    "DEVMCP_FOLLOW_TIMEOUT_MS",
    "DEVMCP_HTTP_TIMEOUT_MS",
    "DEVMCP_TOOL_RESPONSE_MAX_CHARS",
    "DEVMCP_TOOL_CALL_WARN_MS",
    "DEVMCP_LOG_LEVEL",
    "PG_HOST", "PG_PORT", "PG_DATABASE", "PG_USER", "PG_PASSWORD",
    "MYSQL_HOST", "MYSQL_PORT", "MYSQL_DATABASE", "MYSQL_USER", "MYSQL_PASSWORD",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DEVMCP_LOG_DIR", str(tmp_path / "logs"))
    config_module.reset_config()
    yield
    config_module.reset_config()
