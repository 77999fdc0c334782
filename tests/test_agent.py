"""Tests for the agent tool surface: shell skill, skill loader and tool executor."""

from __future__ import annotations

import pytest

from podnote.config import Config
from podnote.core import ToolExecutor, build_instructions
from podnote.factory import create_services
from podnote.skills import BaseSkill, GatewayShellSkill, SkillLoader, ToolDefinition, ToolResult


class ExplodingSkill(BaseSkill):
    name = "exploding"
    description = "Always raises"

    def get_tools(self) -> list[ToolDefinition]:
        return [ToolDefinition(name="explode", description="Raise", parameters={"type": "object"})]

    async def execute(self, tool_name, arguments) -> ToolResult:
        raise RuntimeError("kaboom")


@pytest.fixture
def services(local_fs):
    return create_services(Config(), fs=local_fs)


class TestGatewayShellSkill:
    """Tests for the shell tool."""

    @pytest.mark.asyncio
    async def test_outputs_per_command(self, services):
        skill = services.loader.get_skill_for_tool("shell")
        result = await skill.execute("shell", {"commands": ["notion list", "notion read Books"]})

        assert result.success
        assert result.output == [
            {"stdout": "No skills available.", "stderr": "", "exit_code": 0},
            {
                "stdout": "",
                "stderr": 'Error: Skill "Books" not found. Available: none',
                "exit_code": 1,
            },
        ]

    @pytest.mark.asyncio
    async def test_single_string_command(self, services):
        skill = services.loader.get_skill_for_tool("shell")
        result = await skill.execute("shell", {"commands": "podcast list"})
        assert result.output[0]["stdout"] == "No podcasts saved yet."

    @pytest.mark.asyncio
    async def test_requires_commands(self, services):
        skill = services.loader.get_skill_for_tool("shell")
        result = await skill.execute("shell", {"commands": []})
        assert result.success is False

    @pytest.mark.asyncio
    async def test_commands_run_in_order(self, services, reading_list_skill):
        skill = services.loader.get_skill_for_tool("shell")
        result = await skill.execute("shell", {"commands": [
            f'notion draft "Reading List" "{reading_list_skill}"',
            'notion commit "Reading List"',
            "notion list",
        ]})
        assert [o["exit_code"] for o in result.output] == [0, 0, 0]
        assert result.output[-1]["stdout"] == "Reading List"


class TestSkillLoader:
    def test_registered_tools(self, services):
        names = [t["function"]["name"] for t in services.loader.get_tool_definitions()]
        assert names == ["shell", "search_datasource", "create_page"]

    def test_duplicate_tool_rejected(self, services):
        loader = SkillLoader()
        loader.register(GatewayShellSkill(services.gateway))

        class OtherShell(GatewayShellSkill):
            name = "other"

        with pytest.raises(ValueError, match="already provided"):
            loader.register(OtherShell(services.gateway))

    def test_unknown_tool(self):
        assert SkillLoader().get_skill_for_tool("nope") is None


class TestToolExecutor:
    """ToolExecutor turns every failure into a result dict."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        result = await ToolExecutor(SkillLoader()).execute("nope", {})
        assert result == {"success": False, "output": None, "error": "Unknown tool: nope"}

    @pytest.mark.asyncio
    async def test_tool_exception_becomes_error(self):
        loader = SkillLoader()
        loader.register(ExplodingSkill())
        executor = ToolExecutor(loader)

        result = await executor.execute("explode", {})

        assert result["success"] is False
        assert result["error"] == "kaboom"
        assert executor.execution_count == 1

    @pytest.mark.asyncio
    async def test_batch(self, services):
        executor = ToolExecutor(services.loader)
        results = await executor.execute_batch([
            {"name": "shell", "arguments": {"commands": ["podcast list"]}},
            {"name": "search_datasource", "arguments": {"query": "Books"}},
        ])
        assert results[0]["success"] is True
        assert results[1]["error"] == "NOTION_TOKEN is not set in environment"


class TestInstructions:
    @pytest.mark.asyncio
    async def test_includes_skill_index_and_tools(self, services):
        index = await services.skills.skill_index()
        tools = services.loader.get_skill_for_tool("shell").get_tools()

        prompt = build_instructions(index, tools)

        assert "You are PodNote" in prompt
        assert "## Available Skills\nNo skills configured yet." in prompt
        assert "- **shell**:" in prompt
