from __future__ import annotations

from ..console import Console
from ..llm import LLM

SYSTEM_PROMPT = """You are a helpful coding assistant. The user is asking you a question or wants to have a conversation.

Context from recent actions:
{context}

Provide a helpful, conversational response. If they're asking about code, files, or technical topics, give detailed explanations. Be friendly and informative."""

class ChatTool:
    def __init__(self, llm: LLM, console: Console):
        self.llm = llm
        self.console = console

    def chat(self, message: str, context: str) -> str:
        self.console.info(f"💬 Having conversation about: {message}")
        with self.console.thinking("Thinking..."):
            reply = self.llm.chat([
                {"role": "system", "content": SYSTEM_PROMPT.format(context=context)},
                {"role": "user", "content": message},
            ])
        self.console.print(f"🤖 {reply}")
        return reply
