import json
import time
import logging
import threading
from typing import Any, Dict, Optional

import requests

from devmcp.core.config import get_config
from devmcp.core.errors import (
    MalformedUpstreamDataError,
    RequestFailedError,
    RequestTimeoutError,
)
from devmcp.core.types import HttpResponse

logger = logging.getLogger("DevMcp.runtime.http")

_CHUNK_SIZE = 8192


def _encode_body(method: str, body: Any) -> Optional[str]:
    # GET requests never carry a body.
    if body is None or method == "GET":
        return None
    if isinstance(body, str):
        return body
    return json.dumps(body)


def _decode_body(raw: bytes, content_type: str, encoding: Optional[str], url: str) -> Any:
    text = raw.decode(encoding or "utf-8", errors="replace")
    if "application/json" not in content_type.lower():
        return text
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedUpstreamDataError(
            f"Response from {url} declared application/json but is not valid JSON: {exc}"
        ) from exc


def _exchange(
    method: str,
    url: str,
    headers: Dict[str, str],
    data: Optional[str],
    timeout_ms: int,
    cancelled: threading.Event,
    outcome: Dict[str, Any],
) -> None:
    """Run one request on the calling thread, recording the response or the error in outcome."""
    timeout_seconds = timeout_ms / 1000.0
    try:
        started = time.monotonic()
        deadline = started + timeout_seconds
        resp = requests.request(
            method,
            url,
            headers=headers,
            data=data,
            timeout=timeout_seconds,
            stream=True,
        )
        outcome["response"] = resp
        outcome["duration_ms"] = int(round((time.monotonic() - started) * 1000.0))
        try:
            chunks = []
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                if cancelled.is_set() or time.monotonic() > deadline:
                    raise RequestTimeoutError(url, timeout_ms)
                chunks.append(chunk)
            outcome["raw"] = b"".join(chunks)
        finally:
            resp.close()
    except Exception as exc:
        outcome["error"] = exc


def make_timed_request(
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    body: Any = None,
    timeout_ms: Optional[int] = None,
) -> HttpResponse:
    """
    Issue one HTTP request and measure how long the server took to answer.

    The exchange runs on a worker thread and the caller waits for it at most
    timeout_ms of wall-clock time, covering connect, status line, headers and
    body. At the deadline the call raises RequestTimeoutError; the abandoned
    exchange closes its response at its next read. The duration is taken
    when the response headers arrive.
    """
    if timeout_ms is None:
        timeout_ms = get_config().runtime.http_timeout_ms
    method = method.upper()
    merged_headers = {"Content-Type": "application/json"}
    merged_headers.update(headers or {})
    data = _encode_body(method, body)

    cancelled = threading.Event()
    outcome: Dict[str, Any] = {}
    worker = threading.Thread(
        target=_exchange,
        args=(method, url, merged_headers, data, timeout_ms, cancelled, outcome),
        name="devmcp-http",
        daemon=True,
    )
    worker.start()
    worker.join(timeout_ms / 1000.0)
    if worker.is_alive():
        cancelled.set()
        resp = outcome.get("response")
        if resp is not None:
            resp.close()
        logger.info("Request %s %s cancelled at its %dms deadline", method, url, timeout_ms)
        raise RequestTimeoutError(url, timeout_ms)

    error = outcome.get("error")
    if isinstance(error, requests.Timeout):
        logger.info("Request %s %s timed out after %dms", method, url, timeout_ms)
        raise RequestTimeoutError(url, timeout_ms) from error
    if isinstance(error, requests.RequestException):
        raise RequestFailedError(f"Request to {url} failed: {error}") from error
    if error is not None:
        raise error

    resp = outcome["response"]
    response_headers = {key.lower(): value for key, value in resp.headers.items()}
    content_type = response_headers.get("content-type", "")
    return HttpResponse(
        status=resp.status_code,
        status_text=resp.reason or "",
        headers=response_headers,
        body=_decode_body(outcome["raw"], content_type, resp.encoding, url),
        duration_ms=max(0, outcome["duration_ms"]),
    )
