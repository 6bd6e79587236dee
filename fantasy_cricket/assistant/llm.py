"""Chat-completion client used by the assistant's LLM responder."""

from __future__ import annotations

from typing import Protocol

from openai import OpenAI

from fantasy_cricket.config import llm_cfg
from fantasy_cricket.logging_config import get_logger

logger = get_logger(__name__)


class LLMError(Exception):
    """The model returned nothing usable."""


class ChatClient(Protocol):
    def complete(self, system_prompt: str, user_prompt: str) -> str: ...


class OpenAIChatClient:
    """Thin wrapper over the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = llm_cfg.model,
        max_tokens: int = llm_cfg.max_tokens,
        temperature: float = llm_cfg.temperature,
        client: OpenAI | None = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client or OpenAI(api_key=api_key)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        logger.debug("Requesting completion from %s", self.model)
        response = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        if not response.choices:
            raise LLMError("Completion returned no choices")
        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise LLMError("Completion returned empty content")
        return content
