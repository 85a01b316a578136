import sys
import json
import logging
from typing import Any, BinaryIO, Dict, Optional, TextIO

from devmcp.version import __version__

from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    negotiate_protocol_version,
)
from .registry import ToolRegistry

logger = logging.getLogger("DevMcp.mcp.server")

NOT_INITIALIZED_MESSAGE = "Server not initialized. Send initialize then notifications/initialized."


class McpServer:
    """
    JSON-RPC 2.0 over stdio for one tool registry.

    Messages are read and handled strictly one at a time; a tool call runs to
    completion before the next frame is read.
    """

    def __init__(self, registry: ToolRegistry, output: Optional[TextIO] = None):
        self.registry = registry
        self.output = output
        self.transport_closed = False
        self.session: Dict[str, Any] = {
            "negotiated": False,
            "initialized": False,
            "protocol_version": None,
            "client_info": {},
        }

    def send_rpc(self, message: Dict[str, Any]) -> None:
        """Serialize and send one JSON-RPC message as a single line."""
        if self.transport_closed:
            return
        stream = self.output or sys.stdout
        try:
            stream.write(json.dumps(message) + "\n")
            stream.flush()
        except (BrokenPipeError, OSError) as exc:
            self.transport_closed = True
            logger.warning("MCP stdio transport closed while sending: %s", exc)

    def send_result(self, msg_id: Any, result: Dict[str, Any]) -> None:
        self.send_rpc({"jsonrpc": "2.0", "id": msg_id, "result": result})

    def send_error(self, msg_id: Any, code: int, message: str) -> None:
        self.send_rpc({
            "jsonrpc": "2.0",
            "id": msg_id,
            "error": {
                "code": code,
                "message": message,
            },
        })

    def read_message(self, stream: BinaryIO) -> Optional[Dict[str, Any]]:
        """
        Read one inbound JSON-RPC message from a binary stream.
        Supports Content-Length framing and newline-delimited JSON; frames that
        do not decode to a JSON object are skipped. Returns None at EOF.
        """
        while True:
            line = stream.readline()
            if not line:
                return None
            if not line.strip():
                continue

            if line.lower().startswith(b"content-length:"):
                try:
                    content_length = int(line.split(b":", 1)[1].strip())
                    if content_length <= 0:
                        raise ValueError("content length must be positive")
                except ValueError:
                    logger.warning("Invalid Content-Length header: %r", line)
                    if not self._consume_framing_headers(stream):
                        return None
                    continue

                if not self._consume_framing_headers(stream):
                    return None
                payload = stream.read(content_length)
                if not payload or len(payload) != content_length:
                    return None
            else:
                payload = line

            try:
                msg = json.loads(payload.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError):
                logger.warning("Skipping malformed frame (%d bytes)", len(payload))
                continue
            if isinstance(msg, dict):
                return msg
            logger.warning("Skipping non-object frame")

    def _consume_framing_headers(self, stream: BinaryIO) -> bool:
        while True:
            header_line = stream.readline()
            if not header_line:
                return False
            if header_line in (b"\r\n", b"\n"):
                return True

    def dispatch(self, msg: Dict[str, Any]) -> None:
        """
        Handle a single parsed JSON-RPC message.

        - Unknown request methods (with id) return -32601.
        - Unknown notifications (no id) are ignored.
        - notifications/initialized is only accepted after a successful initialize.
        """
        msg_id = msg.get("id")
        method = msg.get("method")
        params = msg.get("params")

        if not isinstance(method, str):
            if msg_id is not None:
                self.send_error(msg_id, INVALID_REQUEST, "Invalid Request: missing method")
            return

        if method == "initialize":
            self.handle_initialize(msg_id, {} if params is None else params)
            return

        if method == "notifications/initialized":
            if self.session["negotiated"]:
                self.session["initialized"] = True
                logger.info("Client initialized connection")
            else:
                logger.warning("Ignored notifications/initialized before successful initialize")
            return

        if method == "ping":
            if msg_id is not None:
                self.send_result(msg_id, {})
            return

        if method in ("tools/list", "tools/call"):
            validated = self._validate_initialized_params(msg_id, method, params)
            if validated is None:
                return
            if method == "tools/list":
                self.handle_list_tools(msg_id)
            else:
                self.handle_call_tool(msg_id, validated)
            return

        if msg_id is not None:
            self.send_error(msg_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        else:
            logger.debug("Ignoring unknown notification: %s", method)

    def dispatch_guarded(self, msg: Dict[str, Any]) -> None:
        msg_id = msg.get("id")
        try:
            self.dispatch(msg)
        except Exception:
            logger.exception("An unexpected error occurred during RPC dispatch.")
            if msg_id is not None:
                self.send_error(msg_id, INTERNAL_ERROR, "Internal error during request dispatch.")

    def _validate_initialized_params(self, msg_id: Any, method: str, params: Any) -> Optional[Dict[str, Any]]:
        if not self.session["initialized"]:
            if msg_id is not None:
                self.send_error(msg_id, INVALID_REQUEST, NOT_INITIALIZED_MESSAGE)
            return None
        if msg_id is None:
            logger.debug("Ignoring %s notification without id", method)
            return None
        validated = {} if params is None else params
        if not isinstance(validated, dict):
            self.send_error(msg_id, INVALID_PARAMS, f"Invalid params: {method} params must be an object")
            return None
        return validated

    def handle_initialize(self, msg_id: Any, params: Any) -> None:
        """Handle protocol negotiation and server initialization."""
        if not isinstance(params, dict):
            self.send_error(msg_id, INVALID_PARAMS, "Invalid params: initialize params must be an object")
            return

        requested_version = params.get("protocolVersion")
        negotiated_version = negotiate_protocol_version(requested_version)
        if not negotiated_version:
            self.send_error(msg_id, INVALID_PARAMS, f"Unsupported protocol version {requested_version}")
            return

        self.session["negotiated"] = True
        self.session["protocol_version"] = negotiated_version
        client_info = params.get("clientInfo")
        self.session["client_info"] = client_info if isinstance(client_info, dict) else {}
        logger.info(
            "Negotiated protocol %s with client %s",
            negotiated_version,
            self.session["client_info"].get("name", "unknown"),
        )

        self.send_result(msg_id, {
            "protocolVersion": negotiated_version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": self.registry.server_name, "version": __version__},
        })

    def handle_list_tools(self, msg_id: Any) -> None:
        tools = [descriptor.to_payload() for descriptor in self.registry.list_tools()]
        self.send_result(msg_id, {"tools": tools})

    def handle_call_tool(self, msg_id: Any, params: Dict[str, Any]) -> None:
        name = params.get("name")
        if not isinstance(name, str) or not name.strip():
            self.send_error(msg_id, INVALID_PARAMS, "Invalid params: tools/call requires non-empty string name")
            return
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            self.send_error(msg_id, INVALID_PARAMS, "Invalid params: tools/call arguments must be an object")
            return

        result = self.registry.dispatch(name.strip(), arguments)
        self.send_result(msg_id, result.to_payload())

    def serve(self, stream: Optional[BinaryIO] = None) -> None:
        """Read and handle messages until EOF or until the output channel closes."""
        stream = stream or sys.stdin.buffer
        logger.info("%s started with %d tools", self.registry.server_name, len(self.registry))
        while not self.transport_closed:
            msg = self.read_message(stream)
            if msg is None:
                break
            self.dispatch_guarded(msg)
        logger.info("%s stopped", self.registry.server_name)
