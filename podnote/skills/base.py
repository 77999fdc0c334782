"""Tool interface exposed to the agent runtime.

Tools are grouped into skills. PodNote has two: the gateway ``shell`` tool
and the Notion API tools.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


class ToolDefinition(BaseModel):
    """A callable tool with a JSON Schema for its arguments."""

    name: str
    description: str
    parameters: dict[str, Any]  # JSON Schema

    def to_openai_format(self) -> dict[str, Any]:
        """Function-calling entry for chat completion requests."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def summary(self) -> str:
        """One markdown bullet for the system prompt."""
        return f"- **{self.name}**: {self.description}"


class ToolResult(BaseModel):
    """Outcome of a tool call as seen by the agent runtime.

    Unlike ``CommandResult`` this carries structured output (dicts, lists)
    and a free-form error string.
    """

    success: bool
    output: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, output: Any) -> "ToolResult":
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "output": self.output, "error": self.error}


class BaseSkill(ABC):
    """A named group of tools sharing one backing service.

    Example:
        >>> class EchoSkill(BaseSkill):
        ...     name = "echo"
        ...
        ...     def get_tools(self) -> list[ToolDefinition]:
        ...         return [ToolDefinition(name="echo", description="Echo text",
        ...                                parameters={"type": "object", "properties": {}})]
        ...
        ...     async def execute(self, tool_name: str, arguments: dict) -> ToolResult:
        ...         return ToolResult.ok(arguments.get("text", ""))
    """

    name: str = "base_skill"
    description: str = "Base skill"

    @abstractmethod
    def get_tools(self) -> list[ToolDefinition]:
        """Tools this skill answers for."""

    @abstractmethod
    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        """Run one tool call.

        Expected failures come back as ``ToolResult.fail``; anything raised
        is caught by ``ToolExecutor``.
        """

    def tool_names(self) -> list[str]:
        return [tool.name for tool in self.get_tools()]
