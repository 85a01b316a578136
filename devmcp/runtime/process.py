"""
External process runner.

Argument vectors are spawned directly; plain strings go through the platform
shell. Callers that build a string from user input own its quoting.
"""

import os
import shlex
import logging
import subprocess
from typing import Optional, Sequence, Union

from devmcp.core.config import get_config
from devmcp.core.errors import CommandTimeoutError, ExternalProcessError
from devmcp.core.types import CommandOutcome
from devmcp.platform import get_process_group_kwargs, kill_process_tree

logger = logging.getLogger("DevMcp.runtime.process")

Command = Union[str, Sequence[str]]

# Upper bound on draining pipes after the process group has been killed.
_POST_KILL_DRAIN_SECONDS = 2.0


def describe_command(command: Command) -> str:
    if isinstance(command, str):
        return command
    return shlex.join(str(part) for part in command)


def _decode(raw: Optional[bytes]) -> str:
    if not raw:
        return ""
    return raw.decode("utf-8", errors="replace")


def run_command(
    command: Command,
    *,
    cwd: Optional[str] = None,
    timeout_ms: Optional[int] = None,
    allow_follow: bool = False,
) -> CommandOutcome:
    """
    Run an external command and capture both output streams.

    A non-zero exit status is returned in the outcome, not raised; use
    CommandOutcome.raise_for_status() for strict handling.

    Raises:
        ExternalProcessError: the command could not be spawned.
        CommandTimeoutError: the deadline passed (unless allow_follow is set,
            in which case the captured output is returned with timed_out=True).
    """
    if timeout_ms is None:
        timeout_ms = get_config().runtime.command_timeout_ms
    label = describe_command(command)
    shell = isinstance(command, str)
    args = command if shell else [str(part) for part in command]

    if cwd is not None and not os.path.isdir(cwd):
        raise ExternalProcessError(f"Working directory does not exist: {cwd}")

    logger.debug("Running command: %s (cwd=%s, timeout_ms=%d)", label, cwd, timeout_ms)
    try:
        process = subprocess.Popen(
            args,
            shell=shell,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            **get_process_group_kwargs(),
        )
    except OSError as exc:
        raise ExternalProcessError(f"Failed to start command '{label}': {exc}") from exc

    try:
        stdout, stderr = process.communicate(timeout=timeout_ms / 1000.0)
    except subprocess.TimeoutExpired:
        kill_process_tree(process)
        try:
            stdout, stderr = process.communicate(timeout=_POST_KILL_DRAIN_SECONDS)
        except subprocess.TimeoutExpired:
            stdout, stderr = b"", b""
        if not allow_follow:
            logger.warning("Command timed out after %dms: %s", timeout_ms, label)
            raise CommandTimeoutError(label, timeout_ms)
        return CommandOutcome(
            command=label,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            returncode=process.returncode,
            timed_out=True,
        )

    if process.returncode != 0:
        logger.info("Command exited with code %d: %s", process.returncode, label)
    return CommandOutcome(
        command=label,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        returncode=process.returncode,
    )
