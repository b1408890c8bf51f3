"""
Minimal JSON-RPC helpers for the MCP servers.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from screentime_mcp.core import envelope

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class MCPError(RuntimeError):
    def __init__(self, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data or {}


def make_jsonrpc_response(request_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def make_error_response(request_id: Any, *, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": envelope.build_error(code, message, data)}


def error_from_exception(request_id: Any, exc: BaseException) -> Dict[str, Any]:
    if isinstance(exc, MCPError):
        return make_error_response(request_id, code=exc.code, message=exc.message, data=exc.data)
    return make_error_response(
        request_id,
        code=INTERNAL_ERROR,
        message=str(exc) or type(exc).__name__,
        data={"type": type(exc).__name__},
    )
