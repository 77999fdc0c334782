"""Agent-facing tools."""

from podnote.skills.base import BaseSkill, ToolDefinition, ToolResult
from podnote.skills.loader import SkillLoader
from podnote.skills.shell import GatewayShellSkill

__all__ = [
    "BaseSkill",
    "GatewayShellSkill",
    "SkillLoader",
    "ToolDefinition",
    "ToolResult",
]
