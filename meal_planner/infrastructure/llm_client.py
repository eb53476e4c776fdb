# meal_planner/infrastructure/llm_client.py
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import anthropic

from meal_planner.core import config
from meal_planner.core.errors import UpstreamError

log = logging.getLogger("infra.llm_client")


class TextGenerator(Protocol):
    def generate(self, prompt: str, max_tokens: int) -> str: ...


class AnthropicTextGenerator:
    """
    Single-turn call to the Anthropic Messages API.
    Generation is metered: failures are surfaced as UpstreamError, never retried.
    """

    def __init__(
        self,
        api_key: str = config.ANTHROPIC_API_KEY,
        model: str = config.ANTHROPIC_MODEL,
        timeout_s: float = config.GENERATION_TIMEOUT_S,
        base_url: Optional[str] = config.ANTHROPIC_BASE_URL or None,
        client: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_s = timeout_s
        self.base_url = base_url
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = anthropic.Anthropic(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout_s,
                max_retries=0,
            )
        return self._client

    def generate(self, prompt: str, max_tokens: int) -> str:
        if not self.api_key:
            raise UpstreamError("ANTHROPIC_API_KEY is not set")

        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            log.error("Generation request failed: %s", e)
            raise UpstreamError(f"Generation request failed: {e}") from e

        for block in message.content or []:
            if getattr(block, "type", None) == "text" and getattr(block, "text", ""):
                usage = message.usage
                log.info(
                    "Generation done (model=%s, in=%s, out=%s, stop=%s)",
                    message.model, getattr(usage, "input_tokens", None),
                    getattr(usage, "output_tokens", None), message.stop_reason,
                )
                return block.text

        raise UpstreamError("No text response from generation API")
