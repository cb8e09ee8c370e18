from __future__ import annotations
import logging

from .actions import Action, ActionParse, ChatAction, ParseFailure, parse_reply
from .errors import MalformedAction
from .llm import LLM
from .system_context import SystemContext

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a coding assistant. Parse user instructions into JSON actions.

{environment}

Available actions:
- {{"type": "read", "target": "filepath", "reasoning": "why"}} - Read a file
- {{"type": "write", "target": "filepath", "content": "code", "reasoning": "why"}} - Write/modify a file
- {{"type": "run", "command": "shell command", "reasoning": "why"}} - Execute a command
- {{"type": "rollback", "reasoning": "why"}} - Undo last file change
- {{"type": "chat", "message": "the user's question", "reasoning": "why"}} - Answer a question or talk

Context from previous actions:
{context}

Rules:
- Always include reasoning field
- For write actions, generate complete file content
- For run actions, use safe commands appropriate for the shell above
- Use chat for questions and anything that is not a file or command operation
- Respond ONLY with valid JSON"""


class IntentPlanner:
    """Turns one instruction into one action, falling back to chat when the reply is unusable."""

    def __init__(self, llm: LLM, system_context: SystemContext):
        self.llm = llm
        self.system_context = system_context

    def build_prompt(self, context: str) -> str:
        return SYSTEM_PROMPT.format(environment=self.system_context.describe(), context=context)

    def parse_intent(self, instruction: str, context: str) -> Action:
        reply = self.llm.chat([
            {"role": "system", "content": self.build_prompt(context)},
            {"role": "user", "content": instruction},
        ])
        return self.resolve(instruction, parse_reply(reply, instruction))

    def resolve(self, instruction: str, parsed: ActionParse) -> Action:
        if parsed.ok:
            return parsed.action
        if parsed.failure is ParseFailure.MISSING_FIELDS:
            raise MalformedAction(parsed.detail)
        logger.info("falling back to chat (%s): %s", parsed.failure.value, parsed.detail)
        return ChatAction(
            message=instruction,
            reasoning=f"Fallback to chat: {parsed.failure.value} ({parsed.detail})",
        )
