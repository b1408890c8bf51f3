"""
Action registry + built-in Screen Time actions.

Design:
- Keep the MCP tool surface stable: names, descriptions and order never change.
- Actions own their osascript calls; the dispatcher only routes and wraps.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import Action
from .models import ActionContext, ActionDescriptor, ActionOutput


# ---------------------------
# Registry
# ---------------------------

_ACTIONS: Dict[str, Action] = {}


def register(action_impl: Action) -> None:
    name = action_impl.descriptor.name
    if name in _ACTIONS:
        raise ValueError(f"Action already registered: {name}")
    _ACTIONS[name] = action_impl


def get(action_name: str) -> Optional[Action]:
    return _ACTIONS.get(action_name)


def list_actions() -> List[ActionDescriptor]:
    return [impl.descriptor for impl in _ACTIONS.values()]


# ---------------------------
# AppleScript snippets
# ---------------------------

SETTINGS_APP = "System Preferences"
SCREEN_TIME_PANE = "com.apple.preference.screentime"


def reveal_script(anchor: str, pane_id: str = SCREEN_TIME_PANE) -> str:
    return f'tell application "{SETTINGS_APP}" to reveal anchor "{anchor}" of pane id "{pane_id}"'


def activate_script() -> str:
    return f'tell application "{SETTINGS_APP}" to activate'


# ---------------------------
# Built-in Actions
# ---------------------------

class OpenSettingsPanel:
    """
    Reveal one Screen Time anchor, then bring System Preferences forward.
    The activate step only runs once the reveal step has succeeded.
    """

    def __init__(self, name: str, description: str, anchor: str, label: str) -> None:
        self.descriptor = ActionDescriptor(name=name, description=description)
        self.anchor = anchor
        self.label = label

    def execute(self, params: Dict[str, Any], ctx: ActionContext) -> ActionOutput:
        ctx.runner.run(reveal_script(self.anchor))
        ctx.runner.run(activate_script())
        return ActionOutput.text(f"{self.label} settings opened")


SCREEN_TIME_INFO = """Screen Time MCP Information:

Screen Time on macOS has very limited API access. This MCP can:
- Open various Screen Time settings panels

What this MCP cannot do (due to macOS limitations):
- Read app usage data programmatically
- Set app limits programmatically
- Enable/disable downtime programmatically
- Access Screen Time reports

To view your Screen Time data:
1. Open System Preferences/Settings
2. Click on Screen Time
3. View your usage reports and settings

To manage Screen Time:
- Use the tools to open specific settings panels
- Make changes manually in the Settings app"""


class ScreenTimeInfo:
    """
    Describe what the server can and cannot do. Never runs osascript.
    """

    descriptor = ActionDescriptor(
        name="screentime_get_info",
        description="Get information about Screen Time capabilities and limitations",
    )

    def execute(self, params: Dict[str, Any], ctx: ActionContext) -> ActionOutput:
        return ActionOutput.text(SCREEN_TIME_INFO)


# (name, description, anchor, label)
PANELS = [
    ("screentime_open", "Open Screen Time settings", "main", "Screen Time"),
    ("screentime_open_app_limits", "Open App Limits settings", "appLimits", "App Limits"),
    ("screentime_open_downtime", "Open Downtime settings", "downtime", "Downtime"),
    (
        "screentime_open_communication_limits",
        "Open Communication Limits settings",
        "communicationLimits",
        "Communication Limits",
    ),
    ("screentime_open_always_allowed", "Open Always Allowed settings", "alwaysAllowed", "Always Allowed"),
    (
        "screentime_open_content_privacy",
        "Open Content & Privacy Restrictions settings",
        "contentPrivacy",
        "Content & Privacy Restrictions",
    ),
]


# Register defaults at import time; order here is the tools/list order.
for _name, _description, _anchor, _label in PANELS:
    register(OpenSettingsPanel(_name, _description, _anchor, _label))
register(ScreenTimeInfo())
