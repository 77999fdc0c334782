"""Notion tools for the agent: datasource discovery and page creation."""

from __future__ import annotations

from typing import Any

import httpx

from podnote.notion.client import NotionAPIError, NotionClient
from podnote.notion.datasources import DatasourceStore
from podnote.skills.base import BaseSkill, ToolDefinition, ToolResult
from podnote.utils import get_logger

logger = get_logger(__name__)

SEARCH_DESCRIPTION = (
    "Search for a Notion database by name and save its metadata (schema, property options) "
    "to the local cache. Checks the cache first and only queries Notion when needed. "
    "The cache may become outdated: if later operations report schema errors, "
    "call again with force_refresh=true."
)


class NotionSkill(BaseSkill):
    """Find Notion datasources and create pages in them.

    Example:
        >>> skill = NotionSkill(datasources=DatasourceStore(fs), client=NotionClient(token))
        >>> await skill.execute("search_datasource", {"query": "Reading List"})
    """

    name = "notion"
    description = "Search Notion datasources and create pages"

    def __init__(self, datasources: DatasourceStore, client: NotionClient | None = None):
        """Initialize Notion skill.

        Args:
            datasources: Datasource cache
            client: Notion API client; None when no token is configured
        """
        self.datasources = datasources
        self.client = client

    def get_tools(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name="search_datasource",
                description=SEARCH_DESCRIPTION,
                parameters={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "Name of the database to search for",
                        },
                        "force_refresh": {
                            "type": "boolean",
                            "description": "Bypass the local cache and fetch fresh data from Notion",
                            "default": False,
                        },
                    },
                    "required": ["query"],
                },
            ),
            ToolDefinition(
                name="create_page",
                description=(
                    "Create a new page in a cached Notion datasource. Properties and children "
                    "are passed directly to the Notion API. If the API returns an error, "
                    "adjust the format and retry."
                ),
                parameters={
                    "type": "object",
                    "properties": {
                        "datasource_name": {
                            "type": "string",
                            "description": "Name of the cached datasource to create the page under",
                        },
                        "properties": {
                            "type": "object",
                            "description": (
                                'Properties in Notion API format, e.g. {"Name": {"title": '
                                '[{"text": {"content": "Page title"}}]}}'
                            ),
                        },
                        "children": {
                            "type": "array",
                            "items": {"type": "object"},
                            "description": "Optional block objects for the page content",
                        },
                    },
                    "required": ["datasource_name", "properties"],
                },
            ),
        ]

    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        if tool_name == "search_datasource":
            return await self._search_datasource(
                arguments.get("query", ""),
                bool(arguments.get("force_refresh", False)),
            )
        if tool_name == "create_page":
            return await self._create_page(
                arguments.get("datasource_name", ""),
                arguments.get("properties") or {},
                arguments.get("children") or [],
            )
        return ToolResult.fail(f"Unknown tool: {tool_name}")

    async def _search_datasource(self, query: str, force_refresh: bool) -> ToolResult:
        if not query:
            return ToolResult.fail("Search query is required")

        if not force_refresh:
            cached = await self.datasources.check_cached(query)
            if cached.is_cached and cached.datasource is not None:
                return ToolResult.ok({
                    "message": cached.message,
                    "databases": [cached.datasource.model_dump(exclude_none=True)],
                    "from_cache": True,
                })

        if self.client is None:
            return ToolResult.fail("NOTION_TOKEN is not set in environment")

        try:
            found = await self.client.search_data_sources(query)
        except (NotionAPIError, httpx.HTTPError) as e:
            logger.warning("Notion search failed", extra={"query": query, "error": str(e)})
            return ToolResult.fail(f"Notion search failed: {e}")

        if not found:
            return ToolResult.fail(f'No databases found matching "{query}"')

        for datasource in found:
            await self.datasources.save(datasource)

        return ToolResult.ok({
            "message": f'Found and saved {len(found)} database(s) matching "{query}"',
            "databases": [d.model_dump(exclude_none=True) for d in found],
            "from_cache": False,
        })

    async def _create_page(
        self,
        datasource_name: str,
        properties: dict[str, Any],
        children: list[dict[str, Any]],
    ) -> ToolResult:
        datasource = await self.datasources.read_by_name(datasource_name)
        if datasource is None:
            return ToolResult.fail(
                f'Datasource "{datasource_name}" not found in cache. '
                "Use search_datasource first to discover and cache it."
            )

        if self.client is None:
            return ToolResult.fail("NOTION_TOKEN is not set in environment")

        try:
            page = await self.client.create_page(datasource.id, properties, children)
        except (NotionAPIError, httpx.HTTPError) as e:
            return ToolResult.fail(f"Failed to create page: {e}")

        return ToolResult.ok({
            "message": f'Page created successfully in "{datasource.name}"',
            "page_id": page.get("id"),
            "url": page.get("url"),
        })
