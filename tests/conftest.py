import io

import pytest

from coding_agent.backups import BackupManager
from coding_agent.config import AgentConfig
from coding_agent.console import Console


class FakeLLM:
    """Gateway stand-in: hands out scripted replies and records every request."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def chat(self, messages, model=None):
        self.calls.append(messages)
        if not self.replies:
            return ""
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class ScriptedConsole(Console):
    """Console whose answers come from a list; unanswered questions get "n"."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []
        super().__init__(input_func=self._next_answer, out=io.StringIO(), animate=False)

    def _next_answer(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else "n"

    @property
    def text(self):
        return self.out.getvalue()


@pytest.fixture
def cfg(tmp_path):
    return AgentConfig(project_root=tmp_path).resolve()


@pytest.fixture
def backups():
    return BackupManager(capacity=10)
