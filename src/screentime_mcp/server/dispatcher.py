"""
Routes tools/list and tools/call to the action catalog.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from screentime_mcp.config import Settings
from screentime_mcp.core.actions import registry
from screentime_mcp.core.actions.models import ActionContext
from screentime_mcp.core.actions.runner import run_action
from screentime_mcp.core.applescript import ScriptRunner
from screentime_mcp.core.safe_exec import safe_execute

JSON = Dict[str, Any]


class Dispatcher:
    """
    Stateless apart from the runner it hands to actions; safe to share
    across threads and connections.
    """

    def __init__(self, runner: Any = None, settings: Optional[Settings] = None) -> None:
        if runner is None:
            runner = ScriptRunner.from_settings(settings or Settings.from_env())
        self.runner = runner

    def handle_list(self) -> List[JSON]:
        return [descriptor.to_dict() for descriptor in registry.list_actions()]

    def handle_invoke(self, name: str, arguments: Optional[JSON] = None) -> JSON:
        ctx = ActionContext(runner=self.runner)
        return safe_execute(name, lambda: run_action(name, arguments, ctx))
