"""Pure analysis helpers: blame parsing, commit classification, shape checks, timing stats."""

from .blame import parse_blame, render_blame_table
from .commits import classify_changes, parse_name_status, render_commit_suggestion
from .shapes import type_tag, validate_shape
from .stats import collect_timings, compute_performance_stats

__all__ = [
    "classify_changes",
    "collect_timings",
    "compute_performance_stats",
    "parse_blame",
    "parse_name_status",
    "render_blame_table",
    "render_commit_suggestion",
    "type_tag",
    "validate_shape",
]
