"""
osascript command building and synchronous execution.
"""

from __future__ import annotations

import subprocess
import threading
from typing import IO, List, Optional, Tuple

from screentime_mcp.config import DEFAULT_MAX_BUFFER, DEFAULT_OSASCRIPT, Settings
from screentime_mcp.core.log import log_err

_QUOTE_ESCAPE = "'\"'\"'"
_READ_CHUNK = 64 * 1024


class ExecutionFailure(RuntimeError):
    def __init__(self, message: str, source_detail: Optional[str] = None) -> None:
        self.message = message
        self.source_detail = source_detail or None
        super().__init__(f"AppleScript error: {self.detail}")

    @property
    def detail(self) -> str:
        return self.source_detail or self.message


def quote_script(script: str) -> str:
    """
    Single-quote a script for a POSIX shell; each embedded ' becomes '"'"'.
    """
    return "'" + script.replace("'", _QUOTE_ESCAPE) + "'"


def build_command(script: str, interpreter: str = DEFAULT_OSASCRIPT) -> str:
    return f"{interpreter} -e {quote_script(script)}"


def build_argv(script: str, interpreter: str = DEFAULT_OSASCRIPT) -> List[str]:
    return [interpreter, "-e", script]


def _decode(raw) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return str(raw)


class ScriptRunner:
    """
    Runs one osascript process per call and returns its trimmed stdout.

    The argument vector is handed to the OS directly unless use_shell is set,
    in which case the quoted command line goes through /bin/sh.
    """

    def __init__(
        self,
        interpreter: str = DEFAULT_OSASCRIPT,
        max_buffer: int = DEFAULT_MAX_BUFFER,
        use_shell: bool = False,
    ) -> None:
        self.interpreter = interpreter
        self.max_buffer = max_buffer
        self.use_shell = use_shell

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScriptRunner":
        return cls(
            interpreter=settings.osascript,
            max_buffer=settings.max_buffer,
            use_shell=settings.use_shell,
        )

    def command_line(self, script: str) -> str:
        return build_command(script, self.interpreter)

    def run(self, script: str) -> str:
        cmd = self.command_line(script)
        log_err(f"[osascript] exec {cmd}")
        args = cmd if self.use_shell else build_argv(script, self.interpreter)
        try:
            proc = subprocess.Popen(
                args,
                shell=self.use_shell,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            log_err(f"[osascript] launch failed: {exc}")
            raise ExecutionFailure(f"Command failed: {cmd}: {exc}") from exc

        stdout, stderr, overrun = _capture(proc, self.max_buffer)
        if overrun:
            log_err(f"[osascript] output exceeded {self.max_buffer} bytes; process killed")
            raise ExecutionFailure(f"stdout maxBuffer length exceeded ({self.max_buffer} bytes)")

        if proc.returncode != 0:
            detail = _decode(stderr).strip()
            log_err(f"[osascript] exit={proc.returncode} stderr={detail!r}")
            raise ExecutionFailure(f"Command failed: {cmd}", source_detail=detail)

        return _decode(stdout).strip()


def _capture(proc: subprocess.Popen, limit: int) -> Tuple[bytes, bytes, bool]:
    """
    Drain stdout and stderr on pump threads, holding at most `limit` bytes per
    stream. The child is killed as soon as either stream passes the limit.
    """
    overrun = threading.Event()

    def _pump(stream: IO[bytes], sink: List[bytes]) -> None:
        total = 0
        try:
            while True:
                chunk = stream.read(_READ_CHUNK)
                if not chunk:
                    break
                total += len(chunk)
                if total > limit:
                    overrun.set()
                    proc.kill()
                    break
                sink.append(chunk)
        finally:
            stream.close()

    out: List[bytes] = []
    err: List[bytes] = []
    threads = [
        threading.Thread(target=_pump, args=(proc.stdout, out), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, err), daemon=True),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    proc.wait()
    return b"".join(out), b"".join(err), overrun.is_set()
