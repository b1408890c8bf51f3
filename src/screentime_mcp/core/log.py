"""
Stderr logging helpers. Stdout is reserved for JSON-RPC.
"""

from __future__ import annotations

import sys

from screentime_mcp.config import Settings


def log_err(message: str) -> None:
    if Settings.from_env().quiet:
        return
    sys.stderr.write(f"{message}\n")
    sys.stderr.flush()
