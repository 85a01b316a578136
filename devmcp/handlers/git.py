"""
git tool handlers.

Every git invocation is an argument vector rooted at ``git -C <repoPath>``,
so caller strings (branch names, queries, file paths, commit messages) are
never interpreted by a shell. Positional refs (branches, commits, remotes)
that start with "-" are rejected so git cannot read them as options; file
paths follow "--" and queries and messages are bound to their own flag.
"""

import logging
from typing import Any, Callable, Dict, List

from devmcp.analysis.blame import parse_blame, render_blame_table
from devmcp.analysis.commits import classify_changes, parse_name_status, render_commit_suggestion
from devmcp.core.errors import InvalidArgumentError
from devmcp.runtime.process import run_command

logger = logging.getLogger("DevMcp.handlers.git")

LOG_FORMAT = "--pretty=format:%h | %an | %ar | %s"
DEFAULT_LOG_LIMIT = 10

_SEARCH_FLAGS = {
    "message": "--grep={}",
    "author": "--author={}",
    "content": "-S{}",
}


def _git(repo_path: str, *args: Any) -> str:
    """Run git against a repository and return stdout, raising on a non-zero exit."""
    outcome = run_command(["git", "-C", repo_path, *[str(a) for a in args]])
    outcome.raise_for_status()
    return outcome.stdout


def _ref(args: Dict[str, Any], key: str) -> str:
    """A caller-supplied branch, commit or remote; never allowed to read as a git option."""
    value = str(args[key])
    if value.startswith("-"):
        raise InvalidArgumentError(f"{key} must not start with '-': {value}")
    return value


def _do_git_status(args: Dict[str, Any]) -> str:
    repo = args["repoPath"]
    short = _git(repo, "status", "--porcelain", "-b")
    detailed = _git(repo, "status")
    return f"Short status:\n{short}\n\nDetailed status:\n{detailed}"


def _do_git_log(args: Dict[str, Any]) -> str:
    limit = int(args.get("limit") or DEFAULT_LOG_LIMIT)
    cmd: List[Any] = ["log"]
    if args.get("branch"):
        cmd.append(_ref(args, "branch"))
    cmd.extend(["--decorate", "-n", limit, LOG_FORMAT])
    return f"Recent commits:\n{_git(args['repoPath'], *cmd)}"


def _do_git_diff(args: Dict[str, Any]) -> str:
    cmd: List[Any] = ["diff"]
    if args.get("commit1") and args.get("commit2"):
        # A commit range replaces the staged flag.
        cmd.extend([_ref(args, "commit1"), _ref(args, "commit2")])
    elif args.get("staged"):
        cmd.append("--staged")
    if args.get("file"):
        cmd.extend(["--", args["file"]])
    return _git(args["repoPath"], *cmd) or "No changes found"


def _do_git_branches(args: Dict[str, Any]) -> str:
    cmd: List[Any] = ["branch"]
    if args.get("remote"):
        cmd.append("-a")
    cmd.append("-v")
    return f"Branches:\n{_git(args['repoPath'], *cmd)}"


def _do_generate_commit_message(args: Dict[str, Any]) -> str:
    raw = _git(args["repoPath"], "diff", "--staged", "--name-status")
    changes = parse_name_status(raw)
    if not changes:
        return "No staged changes to create a commit message from."
    return render_commit_suggestion(classify_changes(changes))


def _do_git_blame(args: Dict[str, Any]) -> str:
    raw = _git(args["repoPath"], "blame", "--line-porcelain", "--", args["file"])
    return render_blame_table(args["file"], parse_blame(raw))


def _do_git_search_commits(args: Dict[str, Any]) -> str:
    search_type = args["searchType"]
    flag = _SEARCH_FLAGS.get(search_type)
    if flag is None:
        raise InvalidArgumentError(
            f"Unsupported searchType '{search_type}'; expected one of {', '.join(_SEARCH_FLAGS)}"
        )
    query = args["query"]
    out = _git(args["repoPath"], "log", "--all", LOG_FORMAT, flag.format(query))
    return out or f'No commits found matching "{query}"'


def _do_git_stage(args: Dict[str, Any]) -> str:
    repo = args["repoPath"]
    files = args.get("files") or []
    if files:
        _git(repo, "add", "--", *files)
    else:
        _git(repo, "add", "-A")
    status = _git(repo, "status", "--short")
    return f"Staging successful. Current status:\n{status}"


def _do_git_commit(args: Dict[str, Any]) -> str:
    repo = args["repoPath"]
    commit_output = _git(repo, "commit", "-m", args["message"])
    latest = _git(repo, "log", "-1", "--decorate", LOG_FORMAT)
    return f"Commit successful!\n\n{commit_output}\n\nLatest commit:\n{latest}"


def _do_git_push(args: Dict[str, Any]) -> str:
    cmd: List[Any] = ["push"]
    if args.get("force"):
        cmd.append("--force")
    cmd.append(_ref(args, "remote") if args.get("remote") else "origin")
    if args.get("branch"):
        cmd.append(_ref(args, "branch"))
    # git reports progress on stderr, so only the exit status decides failure.
    outcome = run_command(["git", "-C", args["repoPath"], *cmd])
    outcome.raise_for_status()
    logger.info("Pushed %s to %s", args["repoPath"], cmd[-1])
    return f"Push command executed.\n\nSTDOUT:\n{outcome.stdout}\n\nSTDERR:\n{outcome.stderr}"


HANDLERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "git_status": _do_git_status,
    "git_log": _do_git_log,
    "git_diff": _do_git_diff,
    "git_branches": _do_git_branches,
    "generate_commit_message": _do_generate_commit_message,
    "git_blame": _do_git_blame,
    "git_search_commits": _do_git_search_commits,
    "git_stage": _do_git_stage,
    "git_commit": _do_git_commit,
    "git_push": _do_git_push,
}
