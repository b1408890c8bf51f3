"""
Envelope builders for tool results.

A tool result is the MCP ``CallToolResult`` shape:
  {"content": [{"type": "text", "text": "..."}], "isError": false}
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

ERROR_PREFIX = "Error: "


def text_block(text: str) -> Dict[str, str]:
    return {"type": "text", "text": text}


def build_result(blocks: Iterable[str], *, is_error: bool = False) -> Dict[str, Any]:
    content: List[Dict[str, str]] = [text_block(str(b)) for b in blocks]
    return {"content": content, "isError": is_error}


def text_result(text: str) -> Dict[str, Any]:
    return build_result([text])


def error_result(message: str, *, prefixed: bool = True) -> Dict[str, Any]:
    """
    Error envelope. Action failures carry the "Error: " prefix; protocol-level
    answers such as unknown tools are passed with prefixed=False.
    """
    text = f"{ERROR_PREFIX}{message}" if prefixed else message
    return build_result([text], is_error=True)


def build_error(
    code: int,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    error: Dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if details:
        error["data"] = details
    return error

