"""Fetch recent episodes from podcast RSS feeds."""

from __future__ import annotations

import asyncio
import calendar
from datetime import datetime, timedelta, timezone
from typing import Any

import feedparser
import httpx

from podnote.config import RecommendationConfig
from podnote.podcast.models import Episode, FeedError, FeedResult, PodcastEntry
from podnote.utils import get_logger, now_utc, strip_html, truncate_string

logger = get_logger(__name__)


class FeedParseError(Exception):
    """Feed body could not be parsed as RSS/Atom."""


def _published(entry: Any) -> datetime | None:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)


def _description(entry: Any, max_length: int) -> str:
    text = entry.get("summary")
    if not text and entry.get("content"):
        text = entry["content"][0].get("value")
    return truncate_string(strip_html(text), max_length)


def parse_episodes(
    body: str | bytes,
    podcast_name: str,
    days: int,
    config: RecommendationConfig,
    now: datetime | None = None,
) -> list[Episode]:
    """Episodes from the first ``max_episodes_per_feed`` items within the window.

    Raises:
        FeedParseError: If the body is not a feed at all
    """
    feed = feedparser.parse(body)
    if feed.bozo and not feed.entries:
        raise FeedParseError(str(feed.get("bozo_exception") or "Invalid feed"))

    cutoff = (now or now_utc()) - timedelta(days=days)
    episodes = []
    for entry in feed.entries[: config.max_episodes_per_feed]:
        pub_date = _published(entry)
        if pub_date is None or pub_date < cutoff:
            continue
        episodes.append(
            Episode(
                title=entry.get("title") or "Untitled",
                description=_description(entry, config.max_description_length),
                pub_date=pub_date,
                duration=entry.get("itunes_duration"),
                podcast_name=podcast_name,
            )
        )
    return episodes


class FeedFetcher:
    """Download and parse podcast feeds.

    Example:
        >>> fetcher = FeedFetcher(RecommendationConfig())
        >>> result = await fetcher.fetch_all_episodes(podcasts, days=30)
        >>> result.episodes[0].pub_date   # newest first
    """

    def __init__(
        self,
        config: RecommendationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._client = httpx.AsyncClient(
            timeout=config.feed_timeout_seconds,
            follow_redirects=True,
            transport=transport,
        )

    async def fetch_feed_episodes(self, feed_url: str, podcast_name: str, days: int) -> list[Episode]:
        """Episodes of one feed.

        Raises:
            httpx.HTTPError: On transport failure or an error status
            FeedParseError: If the response is not a feed
        """
        resp = await self._client.get(feed_url)
        resp.raise_for_status()
        return parse_episodes(resp.content, podcast_name, days, self.config)

    async def _fetch_one(self, podcast: PodcastEntry, days: int) -> list[Episode] | FeedError:
        try:
            return await self.fetch_feed_episodes(podcast.feed_url, podcast.name, days)
        except (httpx.HTTPError, FeedParseError) as e:
            logger.warning(
                "Feed fetch failed",
                extra={"feed_url": podcast.feed_url, "error": str(e)},
            )
            return FeedError(feed_url=podcast.feed_url, error=str(e) or type(e).__name__)

    async def fetch_all_episodes(self, podcasts: list[PodcastEntry], days: int) -> FeedResult:
        """Fetch all feeds concurrently; one failing feed does not affect the others."""
        results = await asyncio.gather(*(self._fetch_one(p, days) for p in podcasts))

        episodes: list[Episode] = []
        errors: list[FeedError] = []
        for result in results:
            if isinstance(result, FeedError):
                errors.append(result)
            else:
                episodes.extend(result)

        episodes.sort(key=lambda e: e.pub_date, reverse=True)
        return FeedResult(episodes=episodes, errors=errors)

    async def aclose(self) -> None:
        await self._client.aclose()
