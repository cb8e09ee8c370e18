from __future__ import annotations
from pathlib import Path

from ..config import AgentConfig
from ..console import Console
from ..errors import FileAccessError
from ..utils import jail_path, match_any, read_text


PREVIEW_CHARS = 500

class FileSystemTool:
    def __init__(self, cfg: AgentConfig, console: Console):
        self.cfg = cfg
        self.console = console

    def read(self, target: str) -> str:
        path = self._target(target)
        self.console.info(f"📖 Reading: {target}")
        try:
            content = read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(f"Failed to read {target}: {e}") from e

        self.console.info(f"Read {len(content)} characters")
        if len(content) > 1000:
            self.console.print(f"--- File Preview (first {PREVIEW_CHARS} chars) ---")
            self.console.print(content[:PREVIEW_CHARS] + "...")
        else:
            self.console.print("--- File Content ---")
            self.console.print(content)
        self.console.print("--- End ---")
        return content

    def resolve(self, rel: str) -> Path:
        return self._target(rel)

    def _allowed(self, p: Path) -> bool:
        rel = p.relative_to(self.cfg.project_root) if p != self.cfg.project_root else Path(".")
        if not match_any(rel, self.cfg.allow_patterns):
            return False
        if match_any(rel, self.cfg.deny_patterns):
            return False
        return True

    def _target(self, rel: str) -> Path:
        root = self.cfg.project_root
        p = jail_path(root, rel)
        if not self._allowed(p):
            raise PermissionError(f"blocked by pattern: {rel}")
        return p
