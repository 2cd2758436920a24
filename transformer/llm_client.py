"""Send a transformation prompt to the model and clean up the reply."""

from __future__ import annotations

import logging
import re
from typing import Callable

from openai import AzureOpenAI, OpenAI

from transformer.errors import TransformError
from transformer.settings import LLMSettings

logger = logging.getLogger(__name__)

Generate = Callable[[str], str]

# A fence at either end: "```" or "```html", with surrounding whitespace.
_LEADING_FENCE = re.compile(r"\A\s*```[\w.+-]*")
_TRAILING_FENCE = re.compile(r"```\s*\Z")


def strip_code_fences(text: str) -> str:
    """Remove code fences wrapping the reply; fences inside the body are kept.

    "```html\\n<p>Hi</p>\\n```\\n" -> "\\n<p>Hi</p>\\n". Fences are peeled off
    both ends until neither end has one, so applying it twice is the same as once.
    """
    if not text:
        return text or ""
    while True:
        stripped = _LEADING_FENCE.sub("", text, count=1)
        stripped = _TRAILING_FENCE.sub("", stripped, count=1)
        if stripped == text:
            return stripped
        text = stripped


def _build_openai_client(settings: LLMSettings):
    if settings.use_azure:
        return AzureOpenAI(
            api_key=settings.azure_api_key,
            api_version=settings.azure_api_version,
            azure_endpoint=settings.azure_endpoint.rstrip("/"),
            timeout=settings.timeout,
            max_retries=0,
        )
    if not settings.openai_api_key:
        raise ValueError(
            "Set OPENAI_API_KEY for OpenAI, or AZURE_OPENAI_API_KEY and AZURE_OPENAI_ENDPOINT for Azure OpenAI"
        )
    return OpenAI(api_key=settings.openai_api_key, timeout=settings.timeout, max_retries=0)


class OpenAIGenerator:
    """generate(prompt) -> text backed by OpenAI or Azure OpenAI chat completions."""

    def __init__(self, settings: LLMSettings | None = None, client=None):
        self.settings = settings or LLMSettings.from_env()
        self._client = client or _build_openai_client(self.settings)
        if self.settings.use_azure:
            self.model = self.settings.azure_deployment or self.settings.model
        else:
            self.model = self.settings.model

    def __call__(self, prompt: str) -> str:
        resp = self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
        )
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""


class TransformationClient:
    """Runs one prompt through an injected generate() and returns the cleaned reply.

    Failures are raised as TransformError, never replaced by placeholder text.
    No retries.
    """

    def __init__(self, generate: Generate):
        self._generate = generate

    @classmethod
    def from_env(cls) -> "TransformationClient":
        return cls(OpenAIGenerator())

    def transform(self, prompt: str) -> str:
        try:
            raw = self._generate(prompt)
        except TransformError:
            raise
        except Exception as e:
            logger.error("Model call failed: %s", e)
            raise TransformError(str(e) or e.__class__.__name__) from e

        text = strip_code_fences(raw or "")
        if not text.strip():
            raise TransformError("Model returned no usable text")
        logger.info("Model returned %d characters", len(text))
        return text
