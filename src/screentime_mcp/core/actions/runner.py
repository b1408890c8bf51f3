"""
Action runner.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from screentime_mcp.core.coerce import check_arguments, to_arguments

from .models import ActionContext, ActionOutput
from .registry import get as get_action


class UnknownAction(LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


def run_action(action_name: str, params: Optional[Dict[str, Any]], ctx: ActionContext) -> ActionOutput:
    """
    Resolve, validate and execute an action. Errors raised by the action propagate.
    """
    impl = get_action(action_name)
    if impl is None:
        raise UnknownAction(action_name)
    arguments = to_arguments(params)
    check_arguments(impl.descriptor.input_schema, arguments)
    return impl.execute(arguments, ctx)
