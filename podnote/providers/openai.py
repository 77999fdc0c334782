"""OpenAI-compatible chat provider (OpenAI itself, or OpenRouter via base_url)."""

from __future__ import annotations

from typing import Any

import openai

from podnote.providers.base import LLMProvider, LLMResponse, Usage
from podnote.utils import get_logger

logger = get_logger(__name__)


class OpenAIProvider(LLMProvider):
    """Chat completions over ``openai.AsyncOpenAI``.

    Example:
        >>> provider = OpenAIProvider(api_key="...", model="gpt-4o-mini")
        >>> text = await provider.complete("Rank these episodes: ...")

        # OpenRouter or any other compatible gateway:
        >>> provider = OpenAIProvider(
        ...     api_key="...",
        ...     base_url="https://openrouter.ai/api/v1",
        ...     model="deepseek/deepseek-chat",
        ... )
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        default_temperature: float = 0.7,
        default_max_tokens: int = 2048,
    ):
        self.model = model
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens
        if base_url:
            self.provider_name = "openrouter"

        self.client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
        logger.info(
            "Initialized LLM provider",
            extra={"provider": self.provider_name, "model": model},
        )

    async def chat(
        self,
        messages: list[dict[str, Any]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        if system:
            messages = [{"role": "system", "content": system}, *messages]

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.default_temperature if temperature is None else temperature,
                max_tokens=max_tokens or self.default_max_tokens,
            )
        except openai.APIError as e:
            logger.error(
                "Chat completion failed",
                extra={"provider": self.provider_name, "error": str(e)},
            )
            raise

        choice = response.choices[0]
        usage = Usage()
        if response.usage:
            usage = Usage(response.usage.prompt_tokens, response.usage.completion_tokens)
        logger.debug(
            "Chat completion done",
            extra={"model": self.model, "total_tokens": usage.total_tokens},
        )

        return LLMResponse(
            content=choice.message.content or "",
            usage=usage,
            model=response.model or self.model,
            stop_reason=choice.finish_reason or "",
        )
