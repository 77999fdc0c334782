"""iTunes directory search for podcasts."""

from __future__ import annotations

import httpx

from podnote.podcast.models import SearchResult
from podnote.utils import contains_cjk, get_logger

logger = get_logger(__name__)


def detect_country(query: str) -> str:
    """Store front to search: CN for queries with Chinese characters, else US."""
    return "CN" if contains_cjk(query) else "US"


def format_results(query: str, results: list[SearchResult]) -> str:
    if not results:
        return f'No podcasts found for "{query}".'
    return "\n\n".join(
        f"{i}. {r.name} by {r.artist}\n   Feed: {r.feed_url}"
        for i, r in enumerate(results, start=1)
    )


class ITunesClient:
    """Search the public iTunes API for podcasts with an RSS feed."""

    def __init__(
        self,
        url: str = "https://itunes.apple.com/search",
        limit: int = 5,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.limit = limit
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    async def search(self, query: str) -> list[SearchResult]:
        """Search podcasts; results without a feed URL are skipped.

        Raises:
            httpx.HTTPError: On transport failure or an error status
        """
        resp = await self._client.get(
            self.url,
            params={
                "term": query,
                "entity": "podcast",
                "limit": self.limit,
                "country": detect_country(query),
            },
        )
        resp.raise_for_status()

        results = [
            SearchResult(
                name=item.get("collectionName", ""),
                artist=item.get("artistName", ""),
                feed_url=item["feedUrl"],
            )
            for item in resp.json().get("results", [])
            if item.get("feedUrl")
        ]
        logger.debug(f"iTunes returned {len(results)} podcast(s)", extra={"query": query})
        return results

    async def aclose(self) -> None:
        await self._client.aclose()
