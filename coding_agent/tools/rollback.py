from __future__ import annotations

from ..backups import BackupManager
from ..console import Console

class RollbackTool:
    def __init__(self, backups: BackupManager, console: Console):
        self.backups = backups
        self.console = console

    def rollback(self) -> str:
        self.console.info("Rolling back last change...")
        entry = self.backups.restore_latest()
        message = f"Rolled back {entry.original_path} to version from {entry.timestamp}"
        self.console.success(message)
        return message
