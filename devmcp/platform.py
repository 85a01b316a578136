"""
devmcp Platform Abstraction
---------------------------
Cross-platform log directory resolution and process-group management.

Abstracts the OS-specific parts of spawning and killing external tools so
the process runner behaves the same on Windows, Linux and macOS.
"""

import os
import signal
import subprocess
import sys
import logging
from pathlib import Path
from typing import Any, Dict

import platformdirs

logger = logging.getLogger("DevMcp.Platform")

# ---------------------------------------------------------------------------
# Platform detection
# ---------------------------------------------------------------------------

IS_WINDOWS = sys.platform == "win32"
IS_MACOS = sys.platform == "darwin"
IS_LINUX = sys.platform.startswith("linux")

_APP_NAME = "devmcp"
_APP_AUTHOR = "devmcp"


def get_platform_info() -> Dict[str, Any]:
    """Return platform diagnostic information."""
    return {
        "os": sys.platform,
        "python": sys.version,
        "is_windows": IS_WINDOWS,
        "is_macos": IS_MACOS,
        "is_linux": IS_LINUX,
        "log_dir": str(get_log_dir()),
    }


# ---------------------------------------------------------------------------
# Directory resolution
# ---------------------------------------------------------------------------

def get_log_dir() -> Path:
    """
    Get the devmcp log directory.

    Priority: DEVMCP_LOG_DIR env var > platformdirs user log dir.
    """
    env_val = os.environ.get("DEVMCP_LOG_DIR")
    if env_val:
        return Path(env_val)
    return Path(platformdirs.user_log_dir(_APP_NAME, _APP_AUTHOR))


# ---------------------------------------------------------------------------
# Process management (cross-platform)
# ---------------------------------------------------------------------------

def get_process_group_kwargs() -> Dict[str, Any]:
    """
    Popen keyword arguments that place the child in its own process group,
    so a timeout can terminate the whole tree (shell plus grandchildren).
    """
    if IS_WINDOWS:
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def kill_process_tree(process: subprocess.Popen) -> None:
    """Forcefully terminate a child started with get_process_group_kwargs()."""
    if process.poll() is not None:
        return
    try:
        if IS_WINDOWS:
            subprocess.run(
                ["taskkill", "/F", "/T", "/PID", str(process.pid)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        else:
            os.killpg(process.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError) as exc:
        logger.debug("Process group %s already gone: %s", process.pid, exc)
    if process.poll() is None:
        process.kill()
