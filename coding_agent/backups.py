"""
Backup stack that makes file writes reversible.

One :class:`BackupManager` is shared by every component that can write or
roll back within a process; create it once and pass it in.  The index lives
only in memory and is lost when the process exits, the artifacts themselves
are ordinary files next to the originals.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .errors import BackupArtifactMissing, BackupMissing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackupEntry:
    original_path: Path
    backup_path: Path
    timestamp: str  # ISO-8601


def backup_path_for(path: Path, now: Optional[datetime] = None) -> Path:
    ts = (now or datetime.now()).isoformat().replace(":", "-").replace(".", "-")
    candidate = path.with_name(f"{path.name}.backup-{ts}")
    n = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.backup-{ts}-{n}")
        n += 1
    return candidate


class BackupManager:
    def __init__(self, capacity: int = 10):
        self.capacity = capacity
        self._entries: list[BackupEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[BackupEntry]:
        """Oldest first."""
        return list(self._entries)

    def push(self, original_path: Path, backup_path: Path) -> BackupEntry:
        entry = BackupEntry(Path(original_path), Path(backup_path), datetime.now().isoformat())
        self._entries.append(entry)
        while len(self._entries) > self.capacity:
            evicted = self._entries.pop(0)
            logger.debug("evicting backup %s", evicted.backup_path)
            evicted.backup_path.unlink(missing_ok=True)
        return entry

    def most_recent(self) -> Optional[BackupEntry]:
        return self._entries[-1] if self._entries else None

    def remove(self, backup_path: Path) -> None:
        backup_path = Path(backup_path)
        self._entries = [e for e in self._entries if e.backup_path != backup_path]

    def create_backup(self, path: Path) -> BackupEntry:
        """Copy ``path`` next to itself and record the copy."""
        target = backup_path_for(path)
        shutil.copy2(path, target)
        logger.info("created backup %s", target)
        return self.push(path, target)

    def restore_latest(self) -> BackupEntry:
        """Put the most recent backup back in place and forget it."""
        entry = self.most_recent()
        if entry is None:
            raise BackupMissing("No backup available for rollback")
        if not entry.backup_path.exists():
            # the entry can never be restored; drop it so older ones stay reachable
            self.remove(entry.backup_path)
            raise BackupArtifactMissing(f"Backup file not found: {entry.backup_path}")

        shutil.copyfile(entry.backup_path, entry.original_path)
        entry.backup_path.unlink()
        self.remove(entry.backup_path)
        logger.info("restored %s from %s", entry.original_path, entry.backup_path)
        return entry
