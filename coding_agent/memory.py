"""
Short-term memory of what the agent has done in this session.

Only the rendered :meth:`Memory.context` text reaches the model; there is no
structured recall.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .actions import Action, describe

NO_CONTEXT = "No previous context"


@dataclass
class MemoryEntry:
    instruction: str
    action: Action
    result: str
    timestamp: datetime = field(default_factory=datetime.now)


class Memory:
    """Bounded history of (instruction, action, result); oldest entries fall off first."""

    def __init__(self, max_entries: int = 5, context_entries: int = 3, result_preview: int = 100):
        self._max_entries = max_entries
        self._context_entries = context_entries
        self._result_preview = result_preview
        self._entries: list[MemoryEntry] = []

    @property
    def entries(self) -> list[MemoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, instruction: str, action: Action, result: str) -> MemoryEntry:
        entry = MemoryEntry(instruction=instruction, action=action, result=result)
        self._entries.append(entry)
        if len(self._entries) > self._max_entries:
            self._entries = self._entries[-self._max_entries:]
        return entry

    def context(self) -> str:
        if not self._entries:
            return NO_CONTEXT
        return "\n".join(self._render(e) for e in self._entries[-self._context_entries:])

    def _render(self, entry: MemoryEntry) -> str:
        result = entry.result[:self._result_preview]
        if len(entry.result) > self._result_preview:
            result += "..."
        return f'Instruction: "{entry.instruction}" -> Action: {describe(entry.action)} -> Result: {result}'

    def last_entry(self) -> Optional[MemoryEntry]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries = []
