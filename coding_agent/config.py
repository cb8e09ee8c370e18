from __future__ import annotations
from pathlib import Path
from pydantic import BaseModel, Field
from typing import Optional
import os

from dotenv import load_dotenv

class AgentConfig(BaseModel):
    project_root: Path = Field(..., description="Absolute path to the directory the agent works in.")
    allow_shell: bool = True
    shell: str = "bash"  # or "pwsh" on Windows
    allow_patterns: list[str] = ["*"]
    deny_patterns: list[str] = [".git/**", "**/.git/**", "**/node_modules/**", ".env*", "**/.env*"]

    command_timeout: float = 30.0
    max_output_bytes: int = 1024 * 1024
    memory_size: int = 5
    context_entries: int = 3
    max_backups: int = 10

    # OpenRouter (OpenAI-compatible) configuration
    api_key: Optional[str] = Field(None, description="OpenRouter API key for LLM integration")
    base_url: str = Field("https://openrouter.ai/api/v1", description="OpenAI-compatible API base URL")
    model: str = Field("openai/gpt-oss-20b:free", description="Model used for planning and chat")

    @classmethod
    def from_env(cls, project_root: str | Path | None = None, **overrides) -> "AgentConfig":
        load_dotenv(".env")
        load_dotenv(".env.local")
        root = project_root or os.environ.get("AGENT_PROJECT_ROOT") or os.getcwd()
        values = {
            "project_root": Path(root),
            "api_key": os.environ.get("OPENROUTER_API_KEY"),
        }
        if os.environ.get("OPENROUTER_BASE_URL"):
            values["base_url"] = os.environ["OPENROUTER_BASE_URL"]
        if os.environ.get("AGENT_MODEL"):
            values["model"] = os.environ["AGENT_MODEL"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values).resolve()

    def resolve(self):
        self.project_root = self.project_root.resolve()
        return self
