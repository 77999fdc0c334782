"""Shell-style tool that routes agent commands through the gateway."""

from __future__ import annotations

from typing import Any

from podnote.gateway import CommandExecutor
from podnote.skills.base import BaseSkill, ToolDefinition, ToolResult
from podnote.utils import get_logger

logger = get_logger(__name__)


class GatewayShellSkill(BaseSkill):
    """Expose the command gateway as a ``shell`` tool.

    Each command produces one ``{stdout, stderr, exit_code}`` record. Failed
    commands report their rendered text on stderr with exit code 1.

    Example:
        >>> skill = GatewayShellSkill(executor)
        >>> await skill.execute("shell", {"commands": ["notion list", "podcast list"]})
    """

    name = "shell"
    description = "Run notion and podcast commands"

    def __init__(self, executor: CommandExecutor):
        self.executor = executor

    def get_tools(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name="shell",
                description=(
                    "Run one or more notion/podcast commands. "
                    'Use "notion help" or "podcast help" to list them.'
                ),
                parameters={
                    "type": "object",
                    "properties": {
                        "commands": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": 'Commands to run in order, e.g. ["notion read \\"Books\\""]',
                        }
                    },
                    "required": ["commands"],
                },
            )
        ]

    async def run_commands(self, commands: list[str]) -> list[dict[str, Any]]:
        """Run commands in order and collect per-command output."""
        outputs = []
        for command in commands:
            result = await self.executor.execute(command)
            text = result.render()
            outputs.append({
                "stdout": text if result.success else "",
                "stderr": "" if result.success else text,
                "exit_code": 0 if result.success else 1,
            })
        return outputs

    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        if tool_name != "shell":
            return ToolResult.fail(f"Unknown tool: {tool_name}")

        commands = arguments.get("commands")
        if isinstance(commands, str):
            commands = [commands]
        if not commands:
            return ToolResult.fail("At least one command is required")

        logger.debug("Running gateway commands", extra={"count": len(commands)})
        return ToolResult.ok(await self.run_commands(commands))
