"""
Developer tooling handlers: docker, docker-compose, npm, log files, ports and
free-form shell commands.

``run_command`` and ``check_ports`` go through the platform shell; everything
else is spawned from an argument vector.
"""

import os
import json
import shlex
import logging
from collections import deque
from typing import Any, Callable, Dict, List

from devmcp.core.config import get_config
from devmcp.core.errors import ExternalProcessError, InvalidArgumentError, MalformedUpstreamDataError
from devmcp.platform import IS_WINDOWS
from devmcp.runtime.process import run_command

logger = logging.getLogger("DevMcp.handlers.devtools")

# docker expands the \t escapes inside --format itself.
PS_FORMAT = r"table {{.ID}}\t{{.Names}}\t{{.Status}}\t{{.Image}}\t{{.Ports}}"
STATS_FORMAT = r"table {{.Name}}\t{{.CPUPerc}}\t{{.MemUsage}}\t{{.NetIO}}\t{{.BlockIO}}"

DEFAULT_LOG_TAIL = 100
DEFAULT_MONITOR_LINES = 50
COMPOSE_ACTIONS = ("up", "down", "restart", "ps", "logs")
COMPOSE_FILE = "docker-compose.yml"


def _positive_int(args: Dict[str, Any], key: str, default: int) -> int:
    value = args.get(key)
    if value is None:
        return default
    value = int(value)
    if value <= 0:
        raise InvalidArgumentError(f"{key} must be a positive number")
    return value


def _streams(stdout: str, stderr: str) -> str:
    return f"STDOUT:\n{stdout}\n\nSTDERR:\n{stderr}"


def _do_docker_ps(args: Dict[str, Any]) -> str:
    cmd: List[str] = ["docker", "ps"]
    if args.get("all"):
        cmd.append("-a")
    cmd.extend(["--format", PS_FORMAT])
    return run_command(cmd).raise_for_status().stdout


def _do_docker_logs(args: Dict[str, Any]) -> str:
    tail = _positive_int(args, "tail", DEFAULT_LOG_TAIL)
    cmd = ["docker", "logs", args["container"], "--tail", str(tail)]
    if args.get("follow"):
        # A followed stream never ends on its own; the capture window bounds it.
        cmd.append("-f")
        outcome = run_command(
            cmd,
            timeout_ms=get_config().runtime.follow_timeout_ms,
            allow_follow=True,
        )
    else:
        outcome = run_command(cmd)
    return outcome.raise_for_status().stdout or "No logs available"


def _do_docker_exec(args: Dict[str, Any]) -> str:
    try:
        command = shlex.split(args["command"])
    except ValueError as exc:
        raise InvalidArgumentError(f"Cannot parse command: {exc}") from exc
    if not command:
        raise InvalidArgumentError("command must not be empty")
    outcome = run_command(["docker", "exec", args["container"], *command]).raise_for_status()
    return _streams(outcome.stdout, outcome.stderr)


def _do_docker_compose(args: Dict[str, Any]) -> str:
    action = args["action"]
    if action not in COMPOSE_ACTIONS:
        raise InvalidArgumentError(
            f"Unsupported action '{action}'; expected one of {', '.join(COMPOSE_ACTIONS)}"
        )
    cmd = ["docker-compose", "-f", os.path.join(args["projectPath"], COMPOSE_FILE), action]
    if action == "up":
        cmd.append("-d")
    if args.get("service"):
        cmd.append(args["service"])
    outcome = run_command(cmd).raise_for_status()
    return f"{outcome.stdout}\n{outcome.stderr}"


def _do_docker_stats(args: Dict[str, Any]) -> str:
    cmd = ["docker", "stats"]
    if args.get("container"):
        cmd.append(args["container"])
    cmd.extend(["--no-stream", "--format", STATS_FORMAT])
    return run_command(cmd).raise_for_status().stdout


def _do_run_command(args: Dict[str, Any]) -> str:
    outcome = run_command(args["command"], cwd=args.get("workingDir") or None)
    outcome.raise_for_status()
    return _streams(outcome.stdout, outcome.stderr)


def _do_monitor_logs(args: Dict[str, Any]) -> str:
    lines = _positive_int(args, "lines", DEFAULT_MONITOR_LINES)
    path = args["logPath"]
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as handle:
            recent = deque(handle, maxlen=lines)
    except OSError as exc:
        raise InvalidArgumentError(f"Error reading log file: {exc}") from exc
    text = "".join(recent)
    if text.endswith("\n"):
        text = text[:-1]
    return f"Last {lines} lines from {path}:\n\n{text}"


def _do_check_ports(args: Dict[str, Any]) -> str:
    port = int(args["port"])
    if not 0 < port < 65536:
        raise InvalidArgumentError(f"port must be between 1 and 65535, got {port}")
    try:
        outcome = run_command(f"lsof -i :{port} || netstat -an | grep {port}")
    except ExternalProcessError as exc:
        logger.info("Port probe for %d could not run: %s", port, exc)
        return f"Port {port} appears to be free"
    if not outcome.ok:
        # Both probes exit non-zero when nothing is bound to the port.
        return f"Port {port} appears to be free"
    return outcome.stdout or f"No process found using port {port}"


def _read_package_scripts(project_path: str) -> Dict[str, str]:
    package_json = os.path.join(project_path, "package.json")
    try:
        with open(package_json, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as exc:
        raise InvalidArgumentError(f"Cannot read {package_json}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MalformedUpstreamDataError(f"Invalid JSON in {package_json}: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedUpstreamDataError(f"{package_json} must contain a JSON object")
    scripts = data.get("scripts") or {}
    if not isinstance(scripts, dict):
        raise MalformedUpstreamDataError(f"'scripts' in {package_json} must be an object")
    return scripts


def _do_npm_scripts(args: Dict[str, Any]) -> str:
    project_path = args["projectPath"]
    action = args["action"]
    scripts = _read_package_scripts(project_path)

    if action == "list":
        listing = "\n".join(f"  {name}: {command}" for name, command in scripts.items())
        return f"Available scripts:\n{listing}"

    if action == "run":
        script_name = args.get("scriptName")
        if not script_name:
            raise InvalidArgumentError("scriptName is required for 'run' action")
        if script_name not in scripts:
            raise InvalidArgumentError(f"Script '{script_name}' not found in package.json")
        npm = "npm.cmd" if IS_WINDOWS else "npm"
        outcome = run_command([npm, "run", script_name], cwd=project_path).raise_for_status()
        return f"Output from '{script_name}':\n\n{outcome.stdout}\n{outcome.stderr}"

    raise InvalidArgumentError(f"Unsupported action '{action}'; expected 'list' or 'run'")


HANDLERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "docker_ps": _do_docker_ps,
    "docker_logs": _do_docker_logs,
    "docker_exec": _do_docker_exec,
    "docker_compose": _do_docker_compose,
    "docker_stats": _do_docker_stats,
    "run_command": _do_run_command,
    "monitor_logs": _do_monitor_logs,
    "check_ports": _do_check_ports,
    "npm_scripts": _do_npm_scripts,
}
