"""
Safe execution wrapper that guarantees a tool result envelope.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict

from . import envelope
from .actions.models import ActionOutput
from .actions.runner import UnknownAction
from .applescript import ExecutionFailure
from .coerce import ArgumentError
from .log import log_err


def safe_execute(operation: str, func: Callable[[], ActionOutput]) -> Dict[str, Any]:
    """
    Executes an action safely, wrapping all errors into envelopes.
    """
    started = time.perf_counter()
    try:
        out = func()
    except UnknownAction as exc:
        log_err(f"[mcp] {exc}")
        return envelope.error_result(str(exc), prefixed=False)
    except ArgumentError as exc:
        log_err(f"[mcp] {operation} rejected arguments: {exc}")
        return envelope.error_result(f"Invalid arguments for {operation}: {exc}")
    except ExecutionFailure as exc:
        log_err(f"[mcp] {operation} failed: {exc}")
        return envelope.error_result(str(exc))
    except Exception as exc:
        log_err(f"[mcp] {operation} crashed: {type(exc).__name__}: {exc}")
        return envelope.error_result(str(exc))

    duration_ms = int((time.perf_counter() - started) * 1000)
    log_err(f"[mcp] {operation} ok in {duration_ms}ms")
    return envelope.build_result(out.texts)
