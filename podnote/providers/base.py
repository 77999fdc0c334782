"""LLM provider interface for PodNote."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Usage:
    """Token counts reported by the provider."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    content: str
    usage: Usage = field(default_factory=Usage)
    model: str = ""
    stop_reason: str = ""


class LLMProvider(ABC):
    """Text completion backend used for episode ranking.

    Implementations raise their client library's errors unchanged; callers
    decide how a failed completion is reported.
    """

    provider_name: str
    model: str

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Send a chat completion request.

        Args:
            messages: Message dicts with 'role' and 'content'
            system: Optional system prompt
            temperature: Optional temperature override
            max_tokens: Optional max tokens override
        """

    async def complete(self, prompt: str, system: str | None = None) -> str:
        """Single-turn completion of one user prompt."""
        response = await self.chat([{"role": "user", "content": prompt}], system=system)
        return response.content
