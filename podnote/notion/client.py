"""Async client for the Notion REST API."""

from __future__ import annotations

from typing import Any

import httpx

from podnote.notion.models import Datasource, DatasourceProperty
from podnote.utils import get_logger

logger = get_logger(__name__)

# Property types whose schema carries a list of named options
OPTION_TYPES = ("select", "multi_select", "status")


class NotionAPIError(Exception):
    """Notion returned an error response."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"Notion API error {status_code}: {message}")


def _plain_title(raw: dict[str, Any]) -> str:
    parts = raw.get("title") or []
    title = "".join(part.get("plain_text", "") for part in parts if isinstance(part, dict))
    return title.strip() or "(Untitled)"


def extract_datasource(raw: dict[str, Any]) -> Datasource:
    """Build a Datasource record from a Notion data_source object.

    Option names are read from the property's type-specific block, e.g.
    ``{"type": "select", "select": {"options": [{"name": "Done"}]}}``.
    """
    properties: dict[str, DatasourceProperty] = {}
    for prop_name, prop in (raw.get("properties") or {}).items():
        prop_type = prop.get("type", "unknown")
        options = None
        if prop_type in OPTION_TYPES:
            block = prop.get(prop_type) or {}
            options = [opt["name"] for opt in block.get("options", []) if opt.get("name")]
        properties[prop_name] = DatasourceProperty(type=prop_type, options=options or None)

    return Datasource(name=_plain_title(raw), id=raw["id"], properties=properties)


class NotionClient:
    """Thin wrapper over the endpoints the agent needs.

    Example:
        >>> client = NotionClient(token="secret_...")
        >>> sources = await client.search_data_sources("Reading List")
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.notion.com/v1",
        api_version: str = "2025-09-03",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Notion-Version": api_version,
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        resp = await self._client.post(path, json=payload)
        if resp.is_error:
            try:
                message = resp.json().get("message", resp.text)
            except ValueError:
                message = resp.text
            raise NotionAPIError(resp.status_code, message)
        return resp.json()

    async def search_data_sources(self, query: str) -> list[Datasource]:
        """Search data sources by title, most recently edited first."""
        data = await self._post(
            "/search",
            {
                "query": query,
                "filter": {"value": "data_source", "property": "object"},
                "sort": {"direction": "descending", "timestamp": "last_edited_time"},
            },
        )
        results = [r for r in data.get("results", []) if r.get("object") == "data_source"]
        logger.debug(f"Notion search returned {len(results)} data source(s)", extra={"query": query})
        return [extract_datasource(r) for r in results]

    async def create_page(
        self,
        data_source_id: str,
        properties: dict[str, Any],
        children: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Create a page under a data source.

        Returns:
            The created page object
        """
        payload: dict[str, Any] = {
            "parent": {"type": "data_source_id", "data_source_id": data_source_id},
            "properties": properties,
        }
        if children:
            payload["children"] = children
        page = await self._post("/pages", payload)
        logger.info("Created Notion page", extra={"page_id": page.get("id")})
        return page

    async def aclose(self) -> None:
        await self._client.aclose()
