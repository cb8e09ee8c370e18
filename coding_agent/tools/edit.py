from __future__ import annotations
import difflib
import logging

from ..backups import BackupManager
from ..config import AgentConfig
from ..console import CLIColors, Console
from ..errors import FileAccessError
from ..utils import atomic_write, read_text, truncate
from .fs import PREVIEW_CHARS, FileSystemTool

logger = logging.getLogger(__name__)

def render_diff(old: str, new: str, filename: str) -> str:
    lines = difflib.unified_diff(
        old.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=f"{filename} (original)",
        tofile=f"{filename} (modified)",
    )
    out = []
    for line in lines:
        line = line.rstrip("\n")
        if line.startswith(("---", "+++", "@@")):
            out.append(CLIColors.info(line))
        elif line.startswith("+"):
            out.append(CLIColors.success(line))
        elif line.startswith("-"):
            out.append(CLIColors.error(line))
        else:
            out.append(CLIColors.dim(line))
    return "\n".join(out)

class EditTool:
    """Writes whole files after showing the change and getting a yes from the user."""

    def __init__(self, cfg: AgentConfig, fs: FileSystemTool, console: Console, backups: BackupManager):
        self.cfg = cfg
        self.fs = fs
        self.console = console
        self.backups = backups

    def write(self, target: str, content: str) -> str:
        path = self.fs.resolve(target)
        existing = None
        if path.exists():
            try:
                existing = read_text(path)
            except (OSError, UnicodeDecodeError) as e:
                raise FileAccessError(f"Failed to read {target}: {e}") from e

        if existing is None:
            self.console.info(f"📝 New file content for {target}:")
            self.console.print("--- Content Preview ---")
            self.console.print(truncate(content, PREVIEW_CHARS))
            self.console.print("--- End Preview ---")
        elif existing == content:
            self.console.info(f"No changes to {target}")
            return f"No changes to {target}"
        else:
            self.console.info(f"📝 Changes to {target}:")
            self.console.print(render_diff(existing, content, target))

        if not self.console.confirm("Apply these changes?"):
            self.console.warning("Changes cancelled")
            return f"Changes to {target} cancelled"

        try:
            if existing is not None:
                self.backups.create_backup(path)
            atomic_write(path, content.encode("utf-8"))
        except OSError as e:
            raise FileAccessError(f"Failed to write {target}: {e}") from e
        logger.debug("wrote %d bytes to %s", len(content), path)
        self.console.success(f"Written to {target}")
        return f"Written to {target}"
