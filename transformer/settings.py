"""Environment-driven settings. Entry points call load_dotenv() before reading these."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"


@dataclass(frozen=True)
class LLMSettings:
    model: str = DEFAULT_MODEL
    max_tokens: int = 4096
    temperature: float = 0.3
    timeout: float = 60.0
    openai_api_key: str | None = None
    azure_api_key: str | None = None
    azure_endpoint: str | None = None
    azure_api_version: str = DEFAULT_AZURE_API_VERSION
    azure_deployment: str | None = None

    @property
    def use_azure(self) -> bool:
        return bool(self.azure_api_key and self.azure_endpoint)

    @classmethod
    def from_env(cls, environ=None) -> "LLMSettings":
        env = os.environ if environ is None else environ
        model = env.get("TRANSFORMER_LLM_MODEL", DEFAULT_MODEL)
        return cls(
            model=model,
            max_tokens=int(env.get("TRANSFORMER_LLM_MAX_TOKENS", "4096")),
            temperature=float(env.get("TRANSFORMER_LLM_TEMPERATURE", "0.3")),
            timeout=float(env.get("TRANSFORMER_LLM_TIMEOUT", "60")),
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            azure_api_key=env.get("AZURE_OPENAI_API_KEY") or env.get("AZURE_OPENAI_KEY") or None,
            azure_endpoint=env.get("AZURE_OPENAI_ENDPOINT") or None,
            azure_api_version=env.get("AZURE_OPENAI_API_VERSION", DEFAULT_AZURE_API_VERSION),
            azure_deployment=env.get("AZURE_OPENAI_DEPLOYMENT") or None,
        )


def log_level_from_env(environ=None) -> str:
    env = os.environ if environ is None else environ
    return env.get("TRANSFORMER_LOG_LEVEL", "INFO").upper()
