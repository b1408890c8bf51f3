"""
Tolerant coercion helpers for inputs coming from MCP clients.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ArgumentError(ValueError):
    pass


def to_bool(value, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    return default


def to_int(value, default: int = 0) -> int:
    try:
        return int(str(value).strip())
    except Exception:
        return default


def to_arguments(value: Any) -> Dict[str, Any]:
    """
    Normalize tools/call arguments: None -> {}, objects pass through.
    """
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ArgumentError(f"arguments must be an object, got {type(value).__name__}")
    return dict(value)


def check_arguments(schema: Optional[Dict[str, Any]], arguments: Dict[str, Any]) -> None:
    if not schema:
        return
    for key in schema.get("required") or []:
        if key not in arguments:
            raise ArgumentError(f"missing required property {key!r}")
    if schema.get("additionalProperties", True) is False:
        props = schema.get("properties") or {}
        extra = sorted(k for k in arguments if k not in props)
        if extra:
            raise ArgumentError(f"unexpected properties {extra}")
