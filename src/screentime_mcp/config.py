"""
Runtime settings read from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from screentime_mcp.core.coerce import to_bool, to_int

DEFAULT_OSASCRIPT = "osascript"
DEFAULT_MAX_BUFFER = 50 * 1024 * 1024
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765


@dataclass(frozen=True)
class Settings:
    osascript: str = DEFAULT_OSASCRIPT
    max_buffer: int = DEFAULT_MAX_BUFFER
    use_shell: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    quiet: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        max_buffer = to_int(env.get("SCREENTIME_MCP_MAX_BUFFER"), DEFAULT_MAX_BUFFER)
        if max_buffer <= 0:
            max_buffer = DEFAULT_MAX_BUFFER

        port = to_int(env.get("SCREENTIME_MCP_PORT"), DEFAULT_PORT)
        if not 0 <= port <= 65535:
            port = DEFAULT_PORT

        return cls(
            osascript=(env.get("SCREENTIME_MCP_OSASCRIPT") or "").strip() or DEFAULT_OSASCRIPT,
            max_buffer=max_buffer,
            use_shell=to_bool(env.get("SCREENTIME_MCP_USE_SHELL"), False),
            host=(env.get("SCREENTIME_MCP_HOST") or "").strip() or DEFAULT_HOST,
            port=port,
            quiet=to_bool(env.get("SCREENTIME_MCP_QUIET"), False),
        )
