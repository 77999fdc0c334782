"""Agent runtime pieces: tool dispatch and the system prompt."""

from podnote.core.executor import ToolExecutor
from podnote.core.prompts import build_instructions

__all__ = ["ToolExecutor", "build_instructions"]
