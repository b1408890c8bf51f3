import pytest

from screentime_mcp.core.actions import registry
from screentime_mcp.core.actions.models import ActionContext

EXPECTED = [
    ("screentime_open", "Open Screen Time settings"),
    ("screentime_open_app_limits", "Open App Limits settings"),
    ("screentime_open_downtime", "Open Downtime settings"),
    ("screentime_open_communication_limits", "Open Communication Limits settings"),
    ("screentime_open_always_allowed", "Open Always Allowed settings"),
    ("screentime_open_content_privacy", "Open Content & Privacy Restrictions settings"),
    ("screentime_get_info", "Get information about Screen Time capabilities and limitations"),
]


def test_catalog_order_and_descriptions():
    listed = [(d.name, d.description) for d in registry.list_actions()]
    assert listed == EXPECTED


def test_every_action_takes_no_parameters():
    for descriptor in registry.list_actions():
        assert descriptor.input_schema == {"type": "object", "properties": {}, "required": []}


def test_schemas_are_not_shared():
    first, second = registry.list_actions()[:2]
    assert first.input_schema is not second.input_schema


def test_get_resolves_registered_and_rejects_unknown():
    assert registry.get("screentime_open") is not None
    assert registry.get("not_a_real_tool") is None


def test_duplicate_registration_rejected():
    with pytest.raises(ValueError):
        registry.register(registry.ScreenTimeInfo())
    assert len(registry.list_actions()) == 7


def test_panel_anchors_follow_catalog_order():
    anchors = [registry.get(name).anchor for name, _ in EXPECTED[:6]]
    assert anchors == ["main", "appLimits", "downtime", "communicationLimits", "alwaysAllowed", "contentPrivacy"]


def test_scripts():
    assert registry.reveal_script("downtime") == (
        'tell application "System Preferences" to reveal anchor "downtime" '
        'of pane id "com.apple.preference.screentime"'
    )
    assert registry.activate_script() == 'tell application "System Preferences" to activate'


def test_info_action_never_touches_runner():
    class ExplodingRunner:
        def run(self, script):
            raise AssertionError("runner must not be called")

    out = registry.get("screentime_get_info").execute({}, ActionContext(runner=ExplodingRunner()))
    assert out.texts == [registry.SCREEN_TIME_INFO]
