from __future__ import annotations
import logging

from ..actions import Action, describe, ensure_complete
from ..backups import BackupManager
from ..config import AgentConfig
from ..console import Console
from ..llm import LLM
from .chat import ChatTool
from .edit import EditTool
from .fs import FileSystemTool
from .rollback import RollbackTool
from .terminal import TerminalTool

logger = logging.getLogger(__name__)

class Executor:
    def __init__(self, cfg: AgentConfig, llm: LLM, console: Console, backups: BackupManager):
        self.cfg = cfg
        self.console = console
        self.fs = FileSystemTool(cfg, console)
        self.edit = EditTool(cfg, self.fs, console, backups)
        self.term = TerminalTool(cfg, console)
        self.rollback = RollbackTool(backups, console)
        self.chat = ChatTool(llm, console)

    def execute(self, action: Action, context: str = "") -> str:
        ensure_complete(action)
        a = action
        m = {
            "read": lambda: self.fs.read(a.target),
            "write": lambda: self.edit.write(a.target, a.content),
            "run": lambda: self.term.run(a.command),
            "rollback": lambda: self.rollback.rollback(),
            "chat": lambda: self.chat.chat(a.message, context),
        }[a.kind]

        self.console.print(f"⚡ Executing: {a.kind} - {a.reasoning or 'No reasoning provided'}")
        try:
            return m()
        except Exception as e:
            logger.error(f"{describe(a)} failed: {e}")
            raise
