"""
MCP-compatible JSON-RPC stdio server for the Screen Time actions.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional, TextIO

from screentime_mcp.core.coerce import ArgumentError, to_arguments
from screentime_mcp.core.log import log_err
from screentime_mcp.server.dispatcher import Dispatcher
from screentime_mcp.server.protocol import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    MCPError,
    error_from_exception,
    make_error_response,
    make_jsonrpc_response,
)

JSON = Dict[str, Any]

PROTOCOL_VERSION = "2024-11-05"
SERVER_INFO = {"name": "screen-time-mcp", "version": "1.0.0"}
READY_MESSAGE = "Screen Time MCP server running on stdio"


class MCPServer:
    """
    Transport-agnostic JSON-RPC request handler shared by stdio and socket servers.

    `closing` flips once shutdown/exit is handled. The stdio loop stops on it;
    the socket server makes one instance per connection and closes just that one.
    """

    def __init__(self, dispatcher: Optional[Dispatcher] = None) -> None:
        self.dispatcher = dispatcher or Dispatcher()
        self.closing = False

    def handle_request(self, request: Any) -> Optional[JSON]:
        if not isinstance(request, dict):
            return make_error_response(None, code=INVALID_REQUEST, message="Request must be a JSON object")

        request_id = request.get("id")
        is_notification = "id" not in request
        try:
            result = self._dispatch(request)
        except Exception as exc:
            if not isinstance(exc, MCPError):
                log_err(f"[mcp] handle_request error: {type(exc).__name__}: {exc}")
            if is_notification:
                return None
            return error_from_exception(request_id, exc)

        if is_notification:
            return None
        return make_jsonrpc_response(request_id, result)

    def _dispatch(self, request: JSON) -> JSON:
        if request.get("jsonrpc") != "2.0":
            raise MCPError(INVALID_REQUEST, "jsonrpc must be '2.0'")

        method = request.get("method")
        params = request.get("params")
        log_err(f"[mcp] <- method={method} id={request.get('id')}")

        if method == "initialize":
            return {
                "protocolVersion": PROTOCOL_VERSION,
                "serverInfo": dict(SERVER_INFO),
                "capabilities": {"tools": {}},
            }

        if isinstance(method, str) and method.startswith("notifications/"):
            return {}

        if method == "ping":
            return {}

        if method == "tools/list":
            return {"tools": self.dispatcher.handle_list()}

        if method == "tools/call":
            return self._tools_call(params)

        if method == "resources/list":
            return {"resources": []}

        if method == "prompts/list":
            return {"prompts": []}

        if method in ("shutdown", "exit"):
            self.closing = True
            return {}

        raise MCPError(METHOD_NOT_FOUND, f"Method not found: {method}")

    def _tools_call(self, params: Any) -> JSON:
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise MCPError(INVALID_PARAMS, "tools/call params must be an object")
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise MCPError(INVALID_PARAMS, "tools/call requires params.name (string)")
        try:
            arguments = to_arguments(params.get("arguments"))
        except ArgumentError as exc:
            raise MCPError(INVALID_PARAMS, str(exc)) from exc
        log_err(f"[mcp] tools/call name={name} arg_keys={sorted(arguments)}")
        return self.dispatcher.handle_invoke(name, arguments)


def _write(out: TextIO, msg: JSON) -> None:
    out.write(json.dumps(msg, ensure_ascii=False) + "\n")
    out.flush()


def serve(server: MCPServer, stdin: TextIO, stdout: TextIO) -> None:
    """
    Blocking loop reading JSON-RPC lines and emitting responses.
    """
    for raw in stdin:
        line = raw.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError as exc:
            log_err(f"[mcp] invalid JSON: {exc}")
            resp = make_error_response(None, code=PARSE_ERROR, message="Parse error")
        else:
            resp = server.handle_request(message)
        if resp is not None:
            _write(stdout, resp)
        if server.closing:
            break


def main() -> None:
    server = MCPServer()
    log_err(READY_MESSAGE)
    serve(server, sys.stdin, sys.stdout)


if __name__ == "__main__":
    main()
