"""LLM providers for PodNote."""

from podnote.providers.base import LLMProvider, LLMResponse, Usage
from podnote.providers.openai import OpenAIProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "Usage",
    "OpenAIProvider",
]
