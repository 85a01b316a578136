"""
Blame output parsing.

Consumes ``git blame --line-porcelain`` output. Every source line is preceded
by a header block whose first line is the full commit hash; the content line
itself starts with a tab. The parser is a fold over the lines carrying one
immutable attribution value.
"""

import re
from datetime import datetime
from typing import List, NamedTuple, Optional, Sequence, Tuple

from devmcp.core.types import BlameLine

_COMMIT_HEADER = re.compile(r"^[0-9a-f]{40}")
_SHORT_HASH_LEN = 8
_AUTHOR_WIDTH = 13

TABLE_HEADER = "| Line | Commit   | Author        | Date       | Content                  |"
TABLE_SEPARATOR = "|------|----------|---------------|------------|--------------------------|"


class Attribution(NamedTuple):
    commit_hash: Optional[str] = None
    line_number: Optional[int] = None
    author: Optional[str] = None
    date: Optional[str] = None


def _parse_line_number(parts: Sequence[str]) -> Optional[int]:
    # Header layout: <sha> <orig-line> <final-line> [<group-size>]
    if len(parts) < 3:
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


def format_author_time(raw: str) -> Optional[str]:
    """Render a Unix timestamp (seconds) as a locale date string."""
    try:
        timestamp = int(raw.strip())
    except ValueError:
        return None
    try:
        return datetime.fromtimestamp(timestamp).strftime("%x")
    except (OverflowError, OSError, ValueError):
        return None


def advance(current: Attribution, line: str) -> Tuple[Attribution, Optional[BlameLine]]:
    """Fold step: return the next attribution and the record emitted by this line, if any."""
    if _COMMIT_HEADER.match(line):
        parts = line.split(" ")
        return Attribution(
            commit_hash=parts[0][:_SHORT_HASH_LEN],
            line_number=_parse_line_number(parts),
        ), None
    if line.startswith("author-time "):
        return current._replace(date=format_author_time(line[len("author-time "):])), None
    if line.startswith("author "):
        return current._replace(author=line[len("author "):]), None
    if line.startswith("\t"):
        return current, BlameLine(
            line_number=current.line_number,
            commit_hash=current.commit_hash,
            author=current.author,
            date=current.date,
            content=line[1:],
        )
    return current, None


def parse_blame(raw: str) -> List[BlameLine]:
    """Parse line-porcelain blame output into one record per source line, in order."""
    current = Attribution()
    blame_lines: List[BlameLine] = []
    for line in raw.split("\n"):
        current, emitted = advance(current, line)
        if emitted is not None:
            blame_lines.append(emitted)
    return blame_lines


def _cell(value: Optional[object]) -> str:
    return "" if value is None else str(value)


def render_blame_table(path: str, blame_lines: Sequence[BlameLine]) -> str:
    rows = []
    for entry in blame_lines:
        author = _cell(entry.author).ljust(_AUTHOR_WIDTH)[:_AUTHOR_WIDTH]
        content = entry.content.replace("|", "\\|")
        rows.append(
            f"| {_cell(entry.line_number).ljust(4)} | {_cell(entry.commit_hash)} | {author} "
            f"| {_cell(entry.date).ljust(10)} | `{content}` |"
        )
    body = "\n".join(rows)
    return f"Blame for {path}:\n\n{TABLE_HEADER}\n{TABLE_SEPARATOR}\n{body}"
