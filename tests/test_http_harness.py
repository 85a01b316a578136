import json
import socket
import threading
import time
from types import SimpleNamespace

import pytest
import requests

from devmcp.core.errors import MalformedUpstreamDataError, RequestFailedError, RequestTimeoutError
from devmcp.runtime import http as http_module
from devmcp.runtime.http import make_timed_request


class MockResponse:
    def __init__(self, status_code=200, body=b"", headers=None, reason="OK", chunks=None, encoding=None):
        self.status_code = status_code
        self.reason = reason
        self.headers = headers or {}
        self.encoding = encoding
        self._chunks = chunks if chunks is not None else [body]
        self.closed = False

    def iter_content(self, chunk_size=1):
        for chunk in self._chunks:
            if callable(chunk):
                chunk = chunk()
            yield chunk

    def close(self):
        self.closed = True


@pytest.fixture
def captured(monkeypatch):
    calls = []
    state = {"response": MockResponse()}

    def fake_request(method, url, **kwargs):
        calls.append({"method": method, "url": url, **kwargs})
        if isinstance(state["response"], Exception):
            raise state["response"]
        return state["response"]

    monkeypatch.setattr(http_module.requests, "request", fake_request)
    return calls, state


def test_json_body_is_decoded(captured):
    calls, state = captured
    state["response"] = MockResponse(
        status_code=201,
        reason="Created",
        body=json.dumps({"id": 7}).encode(),
        headers={"Content-Type": "application/json; charset=utf-8", "X-Trace": "abc"},
    )
    response = make_timed_request("post", "http://svc/items", body='{"name": "x"}')

    assert response.status == 201
    assert response.status_text == "Created"
    assert response.body == {"id": 7}
    assert response.headers["x-trace"] == "abc"
    assert response.duration_ms >= 0
    assert state["response"].closed
    assert calls[0]["method"] == "POST"
    assert calls[0]["data"] == '{"name": "x"}'
    assert calls[0]["stream"] is True


def test_default_content_type_is_overridable(captured):
    calls, _ = captured
    make_timed_request("GET", "http://svc/")
    assert calls[0]["headers"] == {"Content-Type": "application/json"}

    make_timed_request("GET", "http://svc/", headers={"Content-Type": "text/plain", "Authorization": "t"})
    assert calls[1]["headers"] == {"Content-Type": "text/plain", "Authorization": "t"}


def test_get_drops_body_and_objects_are_serialized(captured):
    calls, _ = captured
    make_timed_request("GET", "http://svc/", body="ignored")
    assert calls[0]["data"] is None

    make_timed_request("PUT", "http://svc/", body={"a": [1, 2]})
    assert json.loads(calls[1]["data"]) == {"a": [1, 2]}


def test_non_json_body_is_text(captured):
    _, state = captured
    state["response"] = MockResponse(body=b"<h1>hi</h1>", headers={"Content-Type": "text/html"})
    assert make_timed_request("GET", "http://svc/").body == "<h1>hi</h1>"


def test_empty_json_body_is_none(captured):
    _, state = captured
    state["response"] = MockResponse(status_code=204, body=b"", headers={"content-type": "application/json"})
    assert make_timed_request("DELETE", "http://svc/1").body is None


def test_invalid_json_raises_malformed(captured):
    _, state = captured
    state["response"] = MockResponse(body=b"{oops", headers={"content-type": "application/json"})
    with pytest.raises(MalformedUpstreamDataError, match="not valid JSON"):
        make_timed_request("GET", "http://svc/")


def test_timeout_maps_to_request_timeout(captured):
    _, state = captured
    state["response"] = requests.ConnectTimeout("slow")
    with pytest.raises(RequestTimeoutError) as excinfo:
        make_timed_request("GET", "http://svc/", timeout_ms=250)
    assert "aborted after 250ms" in str(excinfo.value)


def test_connection_failure_maps_to_request_failed(captured):
    _, state = captured
    state["response"] = requests.ConnectionError("refused")
    with pytest.raises(RequestFailedError, match="refused"):
        make_timed_request("GET", "http://svc/")


def test_deadline_is_checked_between_chunks(captured, monkeypatch):
    _, state = captured
    clock = {"now": 100.0}
    monkeypatch.setattr(http_module, "time", SimpleNamespace(monotonic=lambda: clock["now"]))

    def late_chunk():
        clock["now"] += 5.0
        return b"more"

    state["response"] = MockResponse(chunks=[b"first", late_chunk])
    with pytest.raises(RequestTimeoutError):
        make_timed_request("GET", "http://svc/stream", timeout_ms=1000)
    assert state["response"].closed


def test_timeout_passed_to_requests_in_seconds(captured):
    calls, _ = captured
    make_timed_request("GET", "http://svc/", timeout_ms=1500)
    assert calls[0]["timeout"] == 1.5


def test_default_timeout_from_config(captured, monkeypatch):
    calls, _ = captured
    monkeypatch.setenv("DEVMCP_HTTP_TIMEOUT_MS", "2000")
    from devmcp.core.config import reset_config
    reset_config()
    make_timed_request("GET", "http://svc/")
    assert calls[0]["timeout"] == 2.0


@pytest.fixture
def slow_header_server():
    """Local server that drips its status line and headers one byte every 50ms."""
    stop = threading.Event()
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    listener.settimeout(5)

    def serve():
        try:
            conn, _ = listener.accept()
        except OSError:
            return
        with conn:
            payload = b"HTTP/1.1 200 OK\r\nX-Slow: " + b"a" * 200 + b"\r\nContent-Length: 0\r\n\r\n"
            for byte in payload:
                if stop.wait(0.05):
                    return
                try:
                    conn.sendall(bytes([byte]))
                except OSError:
                    return

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{listener.getsockname()[1]}/"
    stop.set()
    listener.close()
    thread.join(timeout=5)


def test_slow_headers_are_cancelled_at_deadline(slow_header_server):
    started = time.monotonic()
    with pytest.raises(RequestTimeoutError, match="aborted after 300ms"):
        make_timed_request("GET", slow_header_server, timeout_ms=300)
    assert time.monotonic() - started < 2.0
