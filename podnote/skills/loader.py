"""Registry of agent skills and their tools."""

from __future__ import annotations

from typing import Any

from podnote.skills.base import BaseSkill, ToolDefinition
from podnote.utils import get_logger

logger = get_logger(__name__)


class SkillLoader:
    """Hold skill instances and route tool names to them.

    Example:
        >>> loader = SkillLoader()
        >>> loader.register(GatewayShellSkill(executor))
        >>> loader.get_skill_for_tool("shell")
    """

    def __init__(self):
        self._skills: dict[str, BaseSkill] = {}
        self._tool_to_skill: dict[str, str] = {}

    def register(self, skill: BaseSkill) -> None:
        """Add a skill; tool names must be unique across skills."""
        tool_names = skill.tool_names()
        for tool_name in tool_names:
            owner = self._tool_to_skill.get(tool_name)
            if owner is not None and owner != skill.name:
                raise ValueError(f"Tool {tool_name} already provided by skill {owner}")

        self._skills[skill.name] = skill
        self._tool_to_skill.update(dict.fromkeys(tool_names, skill.name))

        logger.info(f"Loaded skill: {skill.name}", extra={"tools": tool_names})

    def get_skill(self, name: str) -> BaseSkill | None:
        return self._skills.get(name)

    def get_skill_for_tool(self, tool_name: str) -> BaseSkill | None:
        skill_name = self._tool_to_skill.get(tool_name)
        if skill_name is None:
            return None
        return self._skills.get(skill_name)

    def get_tools(self) -> list[ToolDefinition]:
        """All tools in registration order."""
        return [tool for skill in self._skills.values() for tool in skill.get_tools()]

    def get_tool_definitions(self) -> list[dict[str, Any]]:
        """All tool definitions in OpenAI format."""
        return [tool.to_openai_format() for tool in self.get_tools()]

    @property
    def skill_names(self) -> list[str]:
        return list(self._skills)
