from __future__ import annotations

import io

import pytest

from screentime_mcp.core import applescript
from screentime_mcp.core.applescript import ExecutionFailure, ScriptRunner
from screentime_mcp.server.dispatcher import Dispatcher

PANELS = [
    ("screentime_open", "main", "Screen Time settings opened"),
    ("screentime_open_app_limits", "appLimits", "App Limits settings opened"),
    ("screentime_open_downtime", "downtime", "Downtime settings opened"),
    ("screentime_open_communication_limits", "communicationLimits", "Communication Limits settings opened"),
    ("screentime_open_always_allowed", "alwaysAllowed", "Always Allowed settings opened"),
    ("screentime_open_content_privacy", "contentPrivacy", "Content & Privacy Restrictions settings opened"),
]


class RecordingRunner:
    def __init__(self, fail_on=None, failure=None):
        self.scripts = []
        self.fail_on = fail_on
        self.failure = failure

    def run(self, script):
        self.scripts.append(script)
        if self.fail_on and self.fail_on in script:
            raise self.failure
        return ""


class FinishedProcess:
    def __init__(self, returncode, stderr):
        self.stdout = io.BytesIO(b"")
        self.stderr = io.BytesIO(stderr)
        self.returncode = returncode

    def kill(self):
        pass

    def wait(self, timeout=None):
        return self.returncode


def _text(result):
    return result["content"][0]["text"]


def test_handle_list_projects_catalog():
    tools = Dispatcher(runner=RecordingRunner()).handle_list()
    assert len(tools) == 7
    names = [t["name"] for t in tools]
    assert len(set(names)) == 7
    for tool in tools:
        assert set(tool) == {"name", "description", "inputSchema"}
        assert tool["inputSchema"]["type"] == "object"
        assert tool["inputSchema"]["required"] == []


@pytest.mark.parametrize("name,anchor,message", PANELS)
def test_open_panel_reveals_then_activates(name, anchor, message):
    runner = RecordingRunner()
    result = Dispatcher(runner=runner).handle_invoke(name, {})

    assert result == {"content": [{"type": "text", "text": message}], "isError": False}
    assert runner.scripts == [
        f'tell application "System Preferences" to reveal anchor "{anchor}" '
        'of pane id "com.apple.preference.screentime"',
        'tell application "System Preferences" to activate',
    ]


def test_get_info_runs_nothing():
    runner = RecordingRunner()
    result = Dispatcher(runner=runner).handle_invoke("screentime_get_info", {})

    assert runner.scripts == []
    assert result["isError"] is False
    text = _text(result)
    assert "Screen Time MCP Information" in text
    assert "macOS limitations" in text
    assert "Open various Screen Time settings panels" in text


def test_unknown_tool():
    runner = RecordingRunner()
    result = Dispatcher(runner=runner).handle_invoke("not_a_real_tool", {})

    assert result == {"content": [{"type": "text", "text": "Unknown tool: not_a_real_tool"}], "isError": True}
    assert runner.scripts == []


def test_failure_with_detail_stops_before_activate():
    failure = ExecutionFailure("Command failed", source_detail="Script Error: Application not found")
    runner = RecordingRunner(fail_on="reveal anchor", failure=failure)

    result = Dispatcher(runner=runner).handle_invoke("screentime_open_downtime", {})

    assert result["isError"] is True
    assert _text(result) == "Error: AppleScript error: Script Error: Application not found"
    assert len(runner.scripts) == 1
    assert "reveal anchor" in runner.scripts[0]


def test_failure_without_detail_uses_message():
    failure = ExecutionFailure("Generic error message")
    runner = RecordingRunner(fail_on="activate", failure=failure)

    result = Dispatcher(runner=runner).handle_invoke("screentime_open", {})

    assert result["isError"] is True
    assert _text(result) == "Error: AppleScript error: Generic error message"
    assert len(runner.scripts) == 2


def test_unexpected_exception_becomes_error_envelope():
    runner = RecordingRunner(fail_on="reveal", failure=KeyError("boom"))
    result = Dispatcher(runner=runner).handle_invoke("screentime_open", {})

    assert result["isError"] is True
    assert _text(result).startswith("Error: ")
    assert "boom" in _text(result)


def test_non_object_arguments_rejected():
    runner = RecordingRunner()
    result = Dispatcher(runner=runner).handle_invoke("screentime_open", ["nope"])

    assert result["isError"] is True
    assert _text(result) == "Error: Invalid arguments for screentime_open: arguments must be an object, got list"
    assert runner.scripts == []


def test_missing_arguments_treated_as_empty():
    runner = RecordingRunner()
    result = Dispatcher(runner=runner).handle_invoke("screentime_open", None)
    assert result["isError"] is False


def test_real_runner_issues_two_command_lines_in_order(monkeypatch):
    calls = []

    def fake_popen(args, **kwargs):
        calls.append(args)
        return FinishedProcess(0, b"")

    monkeypatch.setattr(applescript.subprocess, "Popen", fake_popen)
    runner = ScriptRunner()
    result = Dispatcher(runner=runner).handle_invoke("screentime_open_always_allowed", {})

    assert result["isError"] is False
    assert len(calls) == 2
    first = runner.command_line(calls[0][2])
    second = runner.command_line(calls[1][2])
    assert first.startswith("osascript -e '") and "reveal anchor" in first
    assert second == "osascript -e 'tell application \"System Preferences\" to activate'"


def test_real_runner_failure_skips_activate(monkeypatch):
    calls = []

    def fake_popen(args, **kwargs):
        calls.append(args)
        return FinishedProcess(1, b"Script Error: Application not found\n")

    monkeypatch.setattr(applescript.subprocess, "Popen", fake_popen)
    result = Dispatcher(runner=ScriptRunner()).handle_invoke("screentime_open", {})

    assert len(calls) == 1
    assert result == {
        "content": [{"type": "text", "text": "Error: AppleScript error: Script Error: Application not found"}],
        "isError": True,
    }


def test_dispatcher_builds_runner_from_settings():
    from screentime_mcp.config import Settings

    dispatcher = Dispatcher(settings=Settings(osascript="/opt/osascript", max_buffer=7, use_shell=True))
    assert dispatcher.runner.interpreter == "/opt/osascript"
    assert dispatcher.runner.max_buffer == 7
    assert dispatcher.runner.use_shell is True
