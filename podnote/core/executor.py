"""Tool executor for running skill tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from podnote.utils import get_logger

if TYPE_CHECKING:
    from podnote.skills.loader import SkillLoader

logger = get_logger(__name__)


class ToolExecutor:
    """Dispatch agent tool calls to skills.

    This is the fault boundary of the agent runtime: any exception raised
    by a tool is logged and returned as a failed result dict.

    Example:
        >>> executor = ToolExecutor(skill_loader)
        >>> result = await executor.execute("shell", {"commands": ["notion list"]})
    """

    def __init__(self, skill_loader: "SkillLoader"):
        self.skills = skill_loader
        self._execution_count = 0

    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Execute a tool by name.

        Returns:
            Tool result dict with 'success', 'output' and 'error'
        """
        self._execution_count += 1
        execution_id = self._execution_count

        logger.info("Executing tool", extra={"tool": tool_name, "execution_id": execution_id})

        skill = self.skills.get_skill_for_tool(tool_name)
        if skill is None:
            return {"success": False, "output": None, "error": f"Unknown tool: {tool_name}"}

        try:
            result = await skill.execute(tool_name, arguments)
        except Exception as e:
            logger.error(
                "Tool execution failed",
                extra={"tool": tool_name, "error": str(e), "execution_id": execution_id},
            )
            return {"success": False, "output": None, "error": str(e)}

        logger.info(
            "Tool execution complete",
            extra={"tool": tool_name, "success": result.success, "execution_id": execution_id},
        )
        return result.to_dict()

    async def execute_batch(self, tool_calls: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Execute tool calls sequentially to maintain ordering."""
        results = []
        for tc in tool_calls:
            results.append(await self.execute(tc.get("name", ""), tc.get("arguments", {})))
        return results

    def get_tool_definitions(self) -> list[dict[str, Any]]:
        return self.skills.get_tool_definitions()

    @property
    def execution_count(self) -> int:
        return self._execution_count
