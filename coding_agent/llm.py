from __future__ import annotations
import logging
from typing import Literal, Optional, TypedDict

from openai import OpenAI

from .config import AgentConfig

logger = logging.getLogger(__name__)


class Message(TypedDict):
    role: Literal["system", "user", "assistant"]
    content: str


class LLM:
    """
    Request/response gateway to an OpenAI-compatible chat endpoint (OpenRouter by default).

    No streaming and no function calling: callers get the reply text and are
    responsible for turning it into anything structured.
    """
    def __init__(self, cfg: AgentConfig, client: Optional[OpenAI] = None):
        self.cfg = cfg
        if client is not None:
            self.client = client
        else:
            if not cfg.api_key:
                raise ValueError("OPENROUTER_API_KEY is not set")
            self.client = OpenAI(
                api_key=cfg.api_key,
                base_url=cfg.base_url,
                default_headers={
                    "HTTP-Referer": "https://github.com/coding-agent-cli",
                    "X-Title": "Coding Agent CLI",
                },
            )

    def chat(self, messages: list[Message], model: Optional[str] = None) -> str:
        model = model or self.cfg.model
        logger.debug("chat request: model=%s messages=%d", model, len(messages))
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=0.1,
            )
        except Exception as e:
            logger.error(f"LLM API error: {e}")
            raise

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
