from __future__ import annotations
import logging
import os
import shutil
import signal
import subprocess
import threading

from ..config import AgentConfig
from ..console import Console
from ..errors import CommandFailed, CommandRejected, CommandTimeout

logger = logging.getLogger(__name__)

# matched case-insensitively anywhere in the command string
DENYLIST = (
    "rm -rf /",
    "rm -fr /",
    "rm -rf ~",
    "rm -rf *",
    "del /f /s /q",
    "rd /s /q c:",
    "format c:",
    "mkfs",
    "dd if=/dev/zero of=/dev/",
    ":(){ :|:& };:",
    "shutdown",
    "reboot",
    "poweroff",
)

def rejected_pattern(command: str) -> str | None:
    lowered = command.lower()
    for pattern in DENYLIST:
        if pattern in lowered:
            return pattern
    return None

def trim_partial_char(data: bytes) -> bytes:
    """Drop a UTF-8 sequence cut short at the end of ``data``."""
    for back in range(1, min(4, len(data)) + 1):
        byte = data[-back]
        if byte & 0xC0 == 0x80:
            continue
        if byte < 0x80:
            width = 1
        elif byte >= 0xF0:
            width = 4
        elif byte >= 0xE0:
            width = 3
        else:
            width = 2
        return data if back >= width else data[:-back]
    return data

class ShellRun:
    """One child shell, its combined output pumped into a bounded buffer."""

    def __init__(self, cfg: AgentConfig, command: str):
        self.cfg = cfg
        self.buf = bytearray()
        self.overflow = False
        kwargs = {}
        if os.name == "posix":
            kwargs["start_new_session"] = True
            kwargs["executable"] = shutil.which(cfg.shell) or "/bin/sh"
        self.proc = subprocess.Popen(
            command,
            shell=True,
            cwd=str(cfg.project_root),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            **kwargs,
        )
        self._t = threading.Thread(target=self._pump, daemon=True)
        self._t.start()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _pump(self):
        limit = self.cfg.max_output_bytes
        while True:
            chunk = self.proc.stdout.read1(65536)
            if not chunk:
                break
            room = limit - len(self.buf)
            self.buf.extend(chunk[:room])
            if len(chunk) > room:
                self.overflow = True
                self.kill()
                break

    def kill(self):
        if self.proc.poll() is not None:
            return
        try:
            if os.name == "posix":
                os.killpg(self.proc.pid, signal.SIGKILL)
            else:
                self.proc.kill()
        except ProcessLookupError:
            pass

    def wait(self, timeout: float) -> bool:
        """Returns False if the command had to be killed for running too long."""
        try:
            self.proc.wait(timeout=timeout)
            finished = True
        except subprocess.TimeoutExpired:
            self.kill()
            self.proc.wait()
            finished = False
        self._t.join(timeout=1)
        return finished

    def close(self):
        """Kill whatever is still running and reap it; safe to call more than once."""
        self.kill()
        self.proc.wait()
        self._t.join(timeout=1)
        self.proc.stdout.close()

    @property
    def output(self) -> str:
        data = bytes(self.buf)
        if self.overflow:
            data = trim_partial_char(data)
        return data.decode("utf-8", errors="replace")

class TerminalTool:
    def __init__(self, cfg: AgentConfig, console: Console):
        self.cfg = cfg
        self.console = console

    def run(self, command: str) -> str:
        pattern = rejected_pattern(command)
        if pattern is not None:
            raise CommandRejected(f"Dangerous command blocked for safety (matched {pattern!r})")
        if not self.cfg.allow_shell:
            raise PermissionError("shell disabled by config")

        self.console.info(f"🚀 Running: {command}")
        with self.console.spinner("Running command..."):
            with ShellRun(self.cfg, command) as run:
                finished = run.wait(self.cfg.command_timeout)

        output = run.output
        if output.strip():
            self.console.print(output.rstrip())

        if not finished:
            raise CommandTimeout(f"Command timed out after {self.cfg.command_timeout:g}s: {command}", output)
        if run.overflow:
            raise CommandFailed(
                f"Command output exceeded {self.cfg.max_output_bytes} bytes: {command}", output)
        if run.proc.returncode != 0:
            raise CommandFailed(f"Command failed with exit code {run.proc.returncode}: {command}", output)

        logger.debug("command finished: %s", command)
        return output or "Command executed successfully"
