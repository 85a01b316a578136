"""API testing handlers built on the timed request harness."""

import re
import logging
from typing import Any, Callable, Dict, List

from devmcp.analysis.shapes import validate_shape
from devmcp.analysis.stats import collect_timings, compute_performance_stats
from devmcp.core.errors import DevMcpError, InvalidArgumentError
from devmcp.mcp.utils import to_json_text
from devmcp.runtime.http import make_timed_request

logger = logging.getLogger("DevMcp.handlers.api_testing")

DEFAULT_PERFORMANCE_REQUESTS = 10
PLACEHOLDER_BODY = "// Valid request body based on schema"
_NUMERIC_SEGMENT = re.compile(r"/\d+")


def _do_http_request(args: Dict[str, Any]) -> str:
    timeout = args.get("timeout")
    response = make_timed_request(
        args["method"],
        args["url"],
        args.get("headers"),
        args.get("body"),
        timeout_ms=int(timeout) if timeout else None,
    )
    return to_json_text(response.to_payload())


def _run_scenario(url: str, scenario: Dict[str, Any]) -> Dict[str, Any]:
    name = scenario.get("name")
    try:
        response = make_timed_request(scenario.get("method") or "GET", url, {}, scenario.get("body"))
    except DevMcpError as exc:
        logger.info("Scenario '%s' failed: %s", name, exc)
        return {"name": name, "passed": False, "error": str(exc)}
    expected = scenario.get("expectedStatus")
    return {
        "name": name,
        "passed": expected is not None and response.status == int(expected),
        "expected": expected,
        "actual": response.status,
        "duration": response.duration_ms,
        "response": response.body,
    }


def _do_test_endpoint(args: Dict[str, Any]) -> str:
    url = f"{args['baseUrl']}{args['endpoint']}"
    results = [_run_scenario(url, scenario) for scenario in args["tests"]]
    passed = sum(1 for r in results if r["passed"])
    summary = {
        "total": len(results),
        "passed": passed,
        "failed": len(results) - passed,
        "results": results,
    }
    return to_json_text(summary)


def generate_test_cases(method: str, endpoint: str, has_request_schema: bool = False) -> List[Dict[str, Any]]:
    """Standard scenarios for one endpoint: success, invalid body, not found and unauthorized."""
    method = method.upper()
    label = f"{method} {endpoint}"
    cases: List[Dict[str, Any]] = [{
        "name": f"{label} - Success",
        "description": "Test successful request with valid data",
        "method": method,
        "endpoint": endpoint,
        "expectedStatus": 201 if method == "POST" else 200,
        "body": PLACEHOLDER_BODY if has_request_schema else None,
    }]
    if method != "GET":
        cases.append({
            "name": f"{label} - Invalid Body",
            "description": "Test with invalid request body",
            "method": method,
            "endpoint": endpoint,
            "expectedStatus": 400,
            "body": "{}",
        })
    cases.append({
        "name": f"{label} - Not Found",
        "description": "Test with non-existent resource",
        "method": method,
        "endpoint": _NUMERIC_SEGMENT.sub("/999999", endpoint, count=1),
        "expectedStatus": 404,
    })
    cases.append({
        "name": f"{label} - Unauthorized",
        "description": "Test without authentication",
        "method": method,
        "endpoint": endpoint,
        "expectedStatus": 401,
        "headers": {},
    })
    return cases


def _do_generate_test_cases(args: Dict[str, Any]) -> str:
    cases = generate_test_cases(args["method"], args["endpoint"], bool(args.get("requestSchema")))
    return to_json_text({"testCases": cases})


def _do_performance_test(args: Dict[str, Any]) -> str:
    count = int(args.get("requests") or DEFAULT_PERFORMANCE_REQUESTS)
    if count <= 0:
        raise InvalidArgumentError("requests must be a positive number")
    method, url, body = args["method"], args["url"], args.get("body")
    timings = collect_timings(count, lambda: make_timed_request(method, url, {}, body))
    stats = compute_performance_stats(timings)
    logger.info(
        "Performance test %s %s: %d/%d succeeded",
        method, url, stats.success_count, stats.count,
    )
    return to_json_text(stats.to_payload())


def _do_validate_response(args: Dict[str, Any]) -> str:
    errors = validate_shape(args["response"], args["schema"])
    return to_json_text({"valid": not errors, "errors": errors})


HANDLERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "http_request": _do_http_request,
    "test_endpoint": _do_test_endpoint,
    "generate_test_cases": _do_generate_test_cases,
    "performance_test": _do_performance_test,
    "validate_response": _do_validate_response,
}
