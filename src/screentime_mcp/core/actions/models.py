"""
Core action models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


def no_parameters() -> Dict[str, Any]:
    return {"type": "object", "properties": {}, "required": []}


@dataclass(frozen=True)
class ActionDescriptor:
    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=no_parameters)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class ActionContext:
    """
    Runtime context passed to actions.
    - runner: object with run(script) -> str (see core.applescript.ScriptRunner)
    - extras: future-proof bag (settings, policies, etc.)
    """
    runner: Any
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ActionOutput:
    """
    Text returned by an action. Multiple entries become multiple content blocks.
    """
    texts: List[str] = field(default_factory=list)

    @classmethod
    def text(cls, value: str) -> "ActionOutput":
        return cls(texts=[value])
