"""Timing collection and aggregate statistics for repeated HTTP probes."""

import logging
from typing import Callable, List, Sequence

from devmcp.core.errors import DevMcpError
from devmcp.core.types import HttpResponse, PerformanceStats, RequestTiming

logger = logging.getLogger("DevMcp.analysis.stats")


def collect_timings(count: int, issue: Callable[[], HttpResponse]) -> List[RequestTiming]:
    """
    Issue ``count`` requests one after another and record each outcome.

    A failed request becomes one failed timing and the series continues.
    """
    timings: List[RequestTiming] = []
    for index in range(count):
        try:
            response = issue()
        except DevMcpError as exc:
            logger.info("Probe request %d/%d failed: %s", index + 1, count, exc)
            timings.append(RequestTiming(succeeded=False, error=str(exc)))
            continue
        timings.append(RequestTiming(duration_ms=response.duration_ms, succeeded=True))
    return timings


def compute_performance_stats(timings: Sequence[RequestTiming]) -> PerformanceStats:
    durations = [t.duration_ms for t in timings if t.succeeded and t.duration_ms is not None]
    errors = [t.error or "unknown error" for t in timings if not t.succeeded]
    return PerformanceStats(
        count=len(timings),
        success_count=len(durations),
        failure_count=len(errors),
        average_ms=(sum(durations) / len(durations)) if durations else None,
        min_ms=min(durations) if durations else None,
        max_ms=max(durations) if durations else None,
        durations=durations,
        errors=errors,
    )
