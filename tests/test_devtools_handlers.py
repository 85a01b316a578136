import json
import os

import pytest

from devmcp.core.errors import (
    ExternalProcessError,
    InvalidArgumentError,
    MalformedUpstreamDataError,
)
from devmcp.core.types import CommandOutcome
from devmcp.handlers import devtools


class FakeRunner:
    def __init__(self):
        self.calls = []
        self.outcome = CommandOutcome(command="x", stdout="", returncode=0)
        self.error = None

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def runner(monkeypatch):
    fake = FakeRunner()
    monkeypatch.setattr(devtools, "run_command", fake)
    return fake


def test_docker_ps(runner):
    runner.outcome = CommandOutcome(command="docker ps", stdout="CONTAINER ID   NAMES\n", returncode=0)
    assert devtools.HANDLERS["docker_ps"]({"all": True}) == "CONTAINER ID   NAMES\n"
    command, _ = runner.calls[0]
    assert command == ["docker", "ps", "-a", "--format", devtools.PS_FORMAT]
    assert "\\t" in devtools.PS_FORMAT


def test_docker_logs_defaults(runner):
    assert devtools.HANDLERS["docker_logs"]({"container": "web"}) == "No logs available"
    command, kwargs = runner.calls[0]
    assert command == ["docker", "logs", "web", "--tail", "100"]
    assert kwargs == {}


def test_docker_logs_follow_is_bounded(runner, monkeypatch):
    monkeypatch.setenv("DEVMCP_FOLLOW_TIMEOUT_MS", "1234")
    from devmcp.core.config import reset_config
    reset_config()
    runner.outcome = CommandOutcome(command="docker logs", stdout="line\n", returncode=-9, timed_out=True)
    assert devtools.HANDLERS["docker_logs"]({"container": "web", "tail": 5, "follow": True}) == "line\n"
    command, kwargs = runner.calls[0]
    assert command == ["docker", "logs", "web", "--tail", "5", "-f"]
    assert kwargs == {"timeout_ms": 1234, "allow_follow": True}


def test_docker_logs_rejects_non_positive_tail(runner):
    with pytest.raises(InvalidArgumentError, match="tail"):
        devtools.HANDLERS["docker_logs"]({"container": "web", "tail": 0})


def test_docker_exec_splits_command(runner):
    runner.outcome = CommandOutcome(command="docker exec", stdout="ok\n", stderr="warn\n", returncode=0)
    text = devtools.HANDLERS["docker_exec"]({"container": "db", "command": "psql -c 'select 1'"})
    assert text == "STDOUT:\nok\n\n\nSTDERR:\nwarn\n"
    command, _ = runner.calls[0]
    assert command == ["docker", "exec", "db", "psql", "-c", "select 1"]


def test_docker_exec_rejects_unbalanced_quotes(runner):
    with pytest.raises(InvalidArgumentError, match="Cannot parse command"):
        devtools.HANDLERS["docker_exec"]({"container": "db", "command": "echo 'oops"})


def test_docker_compose_up_is_detached(runner):
    runner.outcome = CommandOutcome(command="compose", stdout="started", stderr="pulling", returncode=0)
    text = devtools.HANDLERS["docker_compose"]({"action": "up", "projectPath": "/srv/app", "service": "api"})
    assert text == "started\npulling"
    command, _ = runner.calls[0]
    assert command == [
        "docker-compose", "-f", os.path.join("/srv/app", "docker-compose.yml"), "up", "-d", "api",
    ]


def test_docker_compose_rejects_unknown_action(runner):
    with pytest.raises(InvalidArgumentError, match="Unsupported action"):
        devtools.HANDLERS["docker_compose"]({"action": "rm", "projectPath": "/srv/app"})
    assert runner.calls == []


def test_docker_stats(runner):
    devtools.HANDLERS["docker_stats"]({"container": "web"})
    devtools.HANDLERS["docker_stats"]({})
    assert runner.calls[0][0] == ["docker", "stats", "web", "--no-stream", "--format", devtools.STATS_FORMAT]
    assert runner.calls[1][0] == ["docker", "stats", "--no-stream", "--format", devtools.STATS_FORMAT]


def test_run_command_uses_shell_string_and_working_dir(runner):
    runner.outcome = CommandOutcome(command="ls", stdout="a\n", stderr="", returncode=0)
    text = devtools.HANDLERS["run_command"]({"command": "ls | head", "workingDir": "/tmp"})
    assert text == "STDOUT:\na\n\n\nSTDERR:\n"
    assert runner.calls[0] == ("ls | head", {"cwd": "/tmp"})


def test_run_command_failure_raises(runner):
    runner.outcome = CommandOutcome(command="false", stdout="", stderr="nope", returncode=1)
    with pytest.raises(ExternalProcessError, match="nope"):
        devtools.HANDLERS["run_command"]({"command": "false"})


def test_monitor_logs_tail(tmp_path):
    log = tmp_path / "app.log"
    log.write_text("\n".join(f"line {i}" for i in range(1, 101)) + "\n")
    text = devtools.HANDLERS["monitor_logs"]({"logPath": str(log), "lines": 3})
    assert text == f"Last 3 lines from {log}:\n\nline 98\nline 99\nline 100"


def test_monitor_logs_default_line_count(tmp_path):
    log = tmp_path / "app.log"
    log.write_text("\n".join(str(i) for i in range(200)))
    text = devtools.HANDLERS["monitor_logs"]({"logPath": str(log)})
    body = text.split("\n\n", 1)[1]
    assert text.startswith("Last 50 lines")
    assert body.splitlines() == [str(i) for i in range(150, 200)]


def test_monitor_logs_missing_file(tmp_path):
    with pytest.raises(InvalidArgumentError, match="Error reading log file"):
        devtools.HANDLERS["monitor_logs"]({"logPath": str(tmp_path / "missing.log")})


def test_check_ports_reports_listener(runner):
    runner.outcome = CommandOutcome(command="lsof", stdout="node 123 TCP *:3000 (LISTEN)\n", returncode=0)
    assert devtools.HANDLERS["check_ports"]({"port": 3000}) == "node 123 TCP *:3000 (LISTEN)\n"
    assert runner.calls[0][0] == "lsof -i :3000 || netstat -an | grep 3000"


def test_check_ports_free_when_lookup_fails(runner):
    runner.outcome = CommandOutcome(command="lsof", stdout="", returncode=1)
    assert devtools.HANDLERS["check_ports"]({"port": 8080}) == "Port 8080 appears to be free"

    runner.error = ExternalProcessError("Failed to start command")
    assert devtools.HANDLERS["check_ports"]({"port": 8080}) == "Port 8080 appears to be free"


def test_check_ports_empty_output(runner):
    assert devtools.HANDLERS["check_ports"]({"port": 22}) == "No process found using port 22"


def test_check_ports_rejects_out_of_range(runner):
    with pytest.raises(InvalidArgumentError):
        devtools.HANDLERS["check_ports"]({"port": 70000})


@pytest.fixture
def project(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"scripts": {"build": "tsc", "test": "jest"}}))
    return tmp_path


def test_npm_scripts_list(project, runner):
    text = devtools.HANDLERS["npm_scripts"]({"projectPath": str(project), "action": "list"})
    assert text == "Available scripts:\n  build: tsc\n  test: jest"
    assert runner.calls == []


def test_npm_scripts_run(project, runner):
    runner.outcome = CommandOutcome(command="npm run build", stdout="built", stderr="", returncode=0)
    text = devtools.HANDLERS["npm_scripts"](
        {"projectPath": str(project), "action": "run", "scriptName": "build"}
    )
    assert text == "Output from 'build':\n\nbuilt\n"
    command, kwargs = runner.calls[0]
    assert command[1:] == ["run", "build"]
    assert kwargs == {"cwd": str(project)}


def test_npm_scripts_run_requires_script_name(project, runner):
    with pytest.raises(InvalidArgumentError, match="scriptName is required"):
        devtools.HANDLERS["npm_scripts"]({"projectPath": str(project), "action": "run"})


def test_npm_scripts_unknown_script(project, runner):
    with pytest.raises(InvalidArgumentError, match="not found"):
        devtools.HANDLERS["npm_scripts"]({"projectPath": str(project), "action": "run", "scriptName": "deploy"})


def test_npm_scripts_malformed_package_json(tmp_path, runner):
    (tmp_path / "package.json").write_text("{not json")
    with pytest.raises(MalformedUpstreamDataError):
        devtools.HANDLERS["npm_scripts"]({"projectPath": str(tmp_path), "action": "list"})


def test_npm_scripts_missing_package_json(tmp_path, runner):
    with pytest.raises(InvalidArgumentError, match="Cannot read"):
        devtools.HANDLERS["npm_scripts"]({"projectPath": str(tmp_path), "action": "list"})
