"""
MCP WebSocket server.

Each text frame carries one JSON-RPC request; the reply goes back as one
frame. Request handling is shared with the stdio server, so this module knows
nothing about individual tools.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import websockets
from websockets.exceptions import ConnectionClosed

from screentime_mcp.config import Settings
from screentime_mcp.core.log import log_err
from screentime_mcp.server.dispatcher import Dispatcher
from screentime_mcp.server.protocol import PARSE_ERROR, make_error_response
from screentime_mcp.server.stdio import MCPServer


def _json_dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False)


async def handle_message(server: MCPServer, raw: Any) -> Optional[str]:
    """
    Decode one frame and run it off the event loop (osascript blocks).
    Returns the reply frame, or None for notifications.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    try:
        message = json.loads(raw)
    except (TypeError, ValueError):
        return _json_dumps(make_error_response(None, code=PARSE_ERROR, message="Parse error"))

    resp = await asyncio.to_thread(server.handle_request, message)
    if resp is None:
        return None
    return _json_dumps(resp)


async def client_loop(server: MCPServer, ws) -> None:
    """
    Serve one connection. `shutdown`/`exit` end this connection only.
    """
    try:
        async for raw in ws:
            reply = await handle_message(server, raw)
            if reply is not None:
                await ws.send(reply)
            if server.closing:
                break
    except ConnectionClosed:
        return


async def serve_socket(host: str, port: int, dispatcher: Optional[Dispatcher] = None) -> None:
    """
    Start the WebSocket server and run until cancelled. Connections share the
    dispatcher; each gets its own MCPServer so a shutdown stays local to it.
    """
    dispatcher = dispatcher or Dispatcher()

    async def _handler(ws) -> None:
        await client_loop(MCPServer(dispatcher), ws)

    async with websockets.serve(_handler, host, port):
        log_err(f"[socket] listening on ws://{host}:{port}")
        await asyncio.Future()


def main() -> None:
    settings = Settings.from_env()
    try:
        asyncio.run(serve_socket(settings.host, settings.port))
    except KeyboardInterrupt:
        log_err("[socket] stopped")


if __name__ == "__main__":
    main()
