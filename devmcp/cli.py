"""
devmcp CLI: run a tool server on stdio or inspect its catalog.

Usage:
    devmcp serve <git|devtools|api-testing|database|all>
    devmcp list-tools <server>
    devmcp info

Commands:
    serve       Run one MCP server over stdin/stdout until EOF.
    list-tools  Print the tool descriptors of a server as JSON.
    info        Print platform and configuration diagnostics as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from devmcp.core.config import DevMcpConfig, get_config
from devmcp.mcp.catalog import SERVER_NAMES, build_registry
from devmcp.mcp.server import McpServer
from devmcp.platform import get_platform_info
from devmcp.version import __version__

logger = logging.getLogger("DevMcp.cli")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "devmcp.log"


def configure_logging(config: DevMcpConfig) -> Optional[Path]:
    """
    Send logs to a file in the log directory and to stderr; stdout carries
    protocol frames only. Returns the log file path, or None when the log
    directory is not writable.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file: Optional[Path] = None
    if config.logging.log_dir:
        try:
            log_dir = Path(config.logging.log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = log_dir / LOG_FILE_NAME
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as exc:
            sys.stderr.write(f"devmcp: cannot open log file in {config.logging.log_dir}: {exc}\n")
            log_file = None
    logging.basicConfig(
        level=getattr(logging, config.logging.level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return log_file


def cmd_serve(args: argparse.Namespace) -> int:
    config = get_config()
    log_file = configure_logging(config)
    logger.info("devmcp %s serving %s (log file: %s)", __version__, args.server, log_file)
    logger.debug("Platform: %s", get_platform_info())
    try:
        registry = build_registry(args.server)
        stdin = sys.stdin.buffer
    except (AttributeError, OSError, ValueError) as exc:
        logger.error("Failed to start %s server: %s", args.server, exc)
        return 1
    McpServer(registry).serve(stdin)
    return 0


def cmd_list_tools(args: argparse.Namespace) -> int:
    registry = build_registry(args.server)
    tools = [descriptor.to_payload() for descriptor in registry.list_tools()]
    print(json.dumps({"server": registry.server_name, "tools": tools}, indent=2))
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    config = get_config()
    runtime = config.runtime.model_dump()
    info = {
        "version": __version__,
        "platform": get_platform_info(),
        "runtime": runtime,
        "postgres": {"host": config.postgres.host, "port": config.postgres.port, "database": config.postgres.database},
        "mysql": {"host": config.mysql.host, "port": config.mysql.port, "database": config.mysql.database},
    }
    print(json.dumps(info, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devmcp",
        description="devmcp: developer workflow tools served over the Model Context Protocol.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n"
               "  devmcp serve git\n"
               "  devmcp serve all\n"
               "  devmcp list-tools database\n",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser(
        "serve",
        help="Run a tool server on stdio.",
        description="Reads JSON-RPC requests from stdin and writes responses to stdout until EOF.",
    )
    serve.add_argument("server", choices=sorted(SERVER_NAMES), help="Which tool set to serve.")

    list_tools = subparsers.add_parser("list-tools", help="Print a server's tool catalog as JSON.")
    list_tools.add_argument("server", choices=sorted(SERVER_NAMES), help="Which tool set to list.")

    subparsers.add_parser("info", help="Print platform and configuration diagnostics.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        return cmd_serve(args)
    if args.command == "list-tools":
        return cmd_list_tools(args)
    if args.command == "info":
        return cmd_info(args)

    parser.print_help()
    return 1


def _serve_shortcut(server: str) -> int:
    return main(["serve", server])


def main_git() -> int:
    return _serve_shortcut("git")


def main_devtools() -> int:
    return _serve_shortcut("devtools")


def main_api_testing() -> int:
    return _serve_shortcut("api-testing")


def main_database() -> int:
    return _serve_shortcut("database")


if __name__ == "__main__":
    raise SystemExit(main())
