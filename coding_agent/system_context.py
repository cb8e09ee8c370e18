"""Description of the machine and workspace, included in planning prompts."""
from __future__ import annotations
import os
import platform
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from .config import AgentConfig

IGNORED_DIRS = {
    "node_modules", ".git", "dist", "build", "coverage", ".next", ".nuxt", "out",
    "target", ".idea", ".vscode", "__pycache__", ".pytest_cache", "venv", ".venv",
    "env", ".env", ".mypy_cache", ".tox",
}
PACKAGE_MANAGERS = ("pip", "uv", "poetry", "npm", "yarn", "pnpm", "bun")

_OS_NAMES = {"Windows": "Windows", "Darwin": "macOS", "Linux": "Linux"}


def tree(root: Path, max_depth: int = 2) -> list[str]:
    """Indented listing of ``root``, directories first, ignored dirs skipped."""
    lines: list[str] = []

    def walk(base: Path, depth: int):
        if depth >= max_depth:
            return
        try:
            entries = sorted(os.scandir(base), key=lambda e: (not e.is_dir(), e.name.lower()))
        except OSError:
            return
        for entry in entries:
            if entry.name in IGNORED_DIRS:
                continue
            indent = "  " * depth
            if entry.is_dir():
                lines.append(f"{indent}{entry.name}/")
                walk(Path(entry.path), depth + 1)
            else:
                lines.append(f"{indent}{entry.name}")

    walk(root, 0)
    return lines


def git_info(root: Path) -> str:
    try:
        branch = subprocess.run(["git", "branch", "--show-current"], cwd=root, capture_output=True,
                                text=True, timeout=5)
        status = subprocess.run(["git", "status", "--short"], cwd=root, capture_output=True,
                                text=True, timeout=5)
    except (OSError, subprocess.TimeoutExpired):
        return "Not a git repository or git not available"
    if branch.returncode != 0 or status.returncode != 0:
        return "Not a git repository or git not available"
    info = f"Current branch: {branch.stdout.strip()}\n"
    if status.stdout.strip():
        info += f"Git status:\n{status.stdout.strip()}"
    else:
        info += "Working directory clean"
    return info


def shell_guidelines(system: str) -> str:
    if system == "Windows":
        return ("You are on Windows. Use PowerShell commands (dir, Copy-Item, Move-Item, "
                "Remove-Item, New-Item -ItemType Directory, $env:NAME). Avoid Unix-only "
                "commands unless WSL or Git Bash is available.")
    return (f"You are on {_OS_NAMES.get(system, system)}. Use Unix/bash commands "
            "(ls, cp, mv, rm, mkdir, $NAME). Paths use forward slashes.")


class SystemContext:
    """Collects the environment description once and serves it verbatim afterwards."""

    def __init__(self, cfg: AgentConfig):
        self.cfg = cfg
        self._text: Optional[str] = None

    def describe(self) -> str:
        if self._text is None:
            self._text = self._collect()
        return self._text

    def _collect(self) -> str:
        root = self.cfg.project_root
        system = platform.system()
        shell = os.path.basename(os.environ.get("SHELL") or os.environ.get("COMSPEC") or self.cfg.shell)
        managers = [pm for pm in PACKAGE_MANAGERS if shutil.which(pm)]
        listing = "\n".join(tree(root)) or "(Empty or unable to read directory)"
        return f"""# System Environment

Operating System: {_OS_NAMES.get(system, system)} ({platform.platform()})
Shell: {shell}
Architecture: {platform.machine()}
Python Version: {platform.python_version()}
Current Working Directory: {root}
Available Package Managers: {', '.join(managers) or 'none detected'}

# Shell Command Guidelines

{shell_guidelines(system)}

# Project Structure

```
{listing}
```

# Git Information

{git_info(root)}
"""
