from __future__ import annotations

import argparse
import json
import os
import subprocess
import sys
import threading
import time
from pathlib import Path
from queue import Empty, Queue
from typing import Any, Dict, List

ROOT = Path(__file__).resolve().parents[1]

JSON = Dict[str, Any]

EXPECTED_TOOLS = [
    "screentime_open",
    "screentime_open_app_limits",
    "screentime_open_downtime",
    "screentime_open_communication_limits",
    "screentime_open_always_allowed",
    "screentime_open_content_privacy",
    "screentime_get_info",
]


def _send(p: subprocess.Popen, obj: JSON) -> None:
    raw = json.dumps(obj, separators=(",", ":")) + "\n"
    assert p.stdin is not None
    p.stdin.write(raw.encode("utf-8"))
    p.stdin.flush()


def _recv(out_q: "Queue[str]", timeout_s: float = 10.0) -> JSON:
    t0 = time.time()
    while True:
        if time.time() - t0 > timeout_s:
            raise TimeoutError("timeout waiting for JSON-RPC reply on stdout")

        try:
            raw = out_q.get(timeout=0.2)
        except Empty:
            continue

        raw = (raw or "").strip()
        if not raw:
            continue

        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"non-JSON on stdout: {raw!r}") from exc


def _text(resp: JSON) -> str:
    return resp.get("result", {}).get("content", [{}])[0].get("text", "")


def main(argv: List[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="End-to-end smoke test of the stdio MCP server.")
    ap.add_argument("--open", action="store_true", help="also call screentime_open (needs macOS or --osascript)")
    ap.add_argument("--osascript", default=None, help="interpreter to use instead of osascript")
    args = ap.parse_args(argv)

    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT / "src"), env.get("PYTHONPATH")]))
    if args.osascript:
        env["SCREENTIME_MCP_OSASCRIPT"] = args.osascript

    p = subprocess.Popen(
        [sys.executable, "-u", "-m", "screentime_mcp.server.stdio"],
        cwd=str(ROOT),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=env,
    )

    out_q: "Queue[str]" = Queue()
    err_lines: List[str] = []

    def _pump(stream, q: "Queue[str] | None", sink: List[str] | None):
        while True:
            b = stream.readline()
            if not b:
                break
            s = b.decode("utf-8", errors="replace").rstrip("\r\n")
            if q is not None:
                q.put(s)
            if sink is not None:
                sink.append(s)

    t_out = threading.Thread(target=_pump, args=(p.stdout, out_q, None), daemon=True)  # type: ignore[arg-type]
    t_err = threading.Thread(target=_pump, args=(p.stderr, None, err_lines), daemon=True)  # type: ignore[arg-type]
    t_out.start()
    t_err.start()

    try:
        _send(
            p,
            {
                "jsonrpc": "2.0",
                "id": 1,
                "method": "initialize",
                "params": {"protocolVersion": "2024-11-05", "capabilities": {}, "clientInfo": {"name": "screentime-smoke", "version": "0"}},
            },
        )
        init_resp = _recv(out_q, timeout_s=15.0)
        assert init_resp.get("id") == 1, init_resp
        assert init_resp["result"]["serverInfo"]["name"] == "screen-time-mcp", init_resp

        _send(p, {"jsonrpc": "2.0", "method": "notifications/initialized"})

        _send(p, {"jsonrpc": "2.0", "id": 2, "method": "tools/list", "params": {}})
        list_resp = _recv(out_q, timeout_s=15.0)
        assert list_resp.get("id") == 2, list_resp
        names = [t.get("name") for t in list_resp["result"]["tools"]]
        assert names == EXPECTED_TOOLS, names

        _send(p, {"jsonrpc": "2.0", "id": 3, "method": "tools/call", "params": {"name": "screentime_get_info", "arguments": {}}})
        info_resp = _recv(out_q, timeout_s=15.0)
        assert info_resp.get("id") == 3, info_resp
        assert info_resp["result"]["isError"] is False, info_resp
        assert "Screen Time MCP Information" in _text(info_resp), info_resp

        _send(p, {"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "screentime_bogus", "arguments": {}}})
        bogus_resp = _recv(out_q, timeout_s=15.0)
        assert bogus_resp["result"]["isError"] is True, bogus_resp
        assert _text(bogus_resp) == "Unknown tool: screentime_bogus", bogus_resp

        if args.open:
            _send(p, {"jsonrpc": "2.0", "id": 5, "method": "tools/call", "params": {"name": "screentime_open", "arguments": {}}})
            open_resp = _recv(out_q, timeout_s=30.0)
            assert open_resp["result"]["isError"] is False, open_resp
            assert _text(open_resp) == "Screen Time settings opened", open_resp

        _send(p, {"jsonrpc": "2.0", "id": 6, "method": "shutdown"})
        bye = _recv(out_q, timeout_s=15.0)
        assert bye.get("id") == 6, bye
        p.wait(timeout=10)

        print("[smoke] OK initialize + tools/list + tools/call(get_info, unknown)" + (" + open" if args.open else ""))

    finally:
        try:
            if p.poll() is None:
                p.terminate()
                try:
                    p.wait(timeout=5)
                except Exception:
                    p.kill()
        finally:
            # server diagnostics go to stderr; anything unprefixed is unexpected
            bad = []
            for ln in err_lines:
                if not ln:
                    continue
                if ln.startswith("[") or ln == "Screen Time MCP server running on stdio":
                    continue
                bad.append(ln)
            if bad:
                raise RuntimeError("unexpected stderr from stdio server:\n" + "\n".join(bad))


if __name__ == "__main__":
    main()
