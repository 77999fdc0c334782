"""Saved podcast list persisted as ``podcasts.yaml`` in the working folder."""

from __future__ import annotations

import yaml

from podnote.podcast.models import DedupResult, PodcastEntry
from podnote.storage import AgentFS
from podnote.utils import get_logger, normalize_key

logger = get_logger(__name__)

PODCASTS_FILE = "podcasts.yaml"


def deduplicate(podcasts: list[PodcastEntry]) -> list[PodcastEntry]:
    """Keep the first entry per feed URL; entries missing a field are dropped."""
    seen: dict[str, PodcastEntry] = {}
    for podcast in podcasts:
        if not podcast.name or not podcast.feed_url:
            continue
        seen.setdefault(normalize_key(podcast.feed_url), podcast)
    return list(seen.values())


class PodcastStore:
    """Load, append and deduplicate saved podcasts.

    Example:
        >>> store = PodcastStore(fs)
        >>> await store.append("Hard Fork", "https://feeds.example.com/hardfork")
        >>> (await store.check_and_dedup("hard fork")).is_duplicate
        True
    """

    def __init__(self, fs: AgentFS, path: str = PODCASTS_FILE):
        self.fs = fs
        self.path = path

    async def load(self) -> list[PodcastEntry]:
        content = await self.fs.read_file(self.path)
        if not content:
            return []

        data = yaml.safe_load(content) or {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed podcast list", extra={"path": self.path})
            return []
        podcasts = data.get("podcasts")
        if not isinstance(podcasts, list):
            return []

        entries = []
        for item in podcasts:
            if isinstance(item, dict):
                entries.append(
                    PodcastEntry(
                        name=str(item.get("name") or ""),
                        feed_url=str(item.get("feed_url") or ""),
                    )
                )
        return entries

    async def _save(self, podcasts: list[PodcastEntry]) -> None:
        content = yaml.safe_dump(
            {"podcasts": [p.model_dump() for p in podcasts]},
            sort_keys=False,
            allow_unicode=True,
        )
        await self.fs.write_file(self.path, content)

    async def append(self, name: str, feed_url: str) -> PodcastEntry:
        entry = PodcastEntry(name=name, feed_url=feed_url)
        podcasts = await self.load()
        podcasts.append(entry)
        await self._save(podcasts)
        logger.info(f"Saved podcast {name}", extra={"feed_url": feed_url})
        return entry

    async def check_and_dedup(self, name: str) -> DedupResult:
        """Check whether a podcast is already saved.

        Duplicate feed URLs in the stored file are removed as a side effect.
        """
        podcasts = await self.load()
        if not podcasts:
            return DedupResult(
                is_duplicate=False,
                message="No podcasts saved yet. You can proceed with searching and saving.",
            )

        unique = deduplicate(podcasts)
        if len(unique) < len(podcasts):
            await self._save(unique)
            logger.info(
                "Removed duplicate podcast entries",
                extra={"removed": len(podcasts) - len(unique)},
            )

        key = normalize_key(name)
        duplicate = next((p for p in unique if normalize_key(p.name) == key), None)
        if duplicate is not None:
            return DedupResult(
                is_duplicate=True,
                existing=duplicate,
                message=(
                    f'Podcast "{duplicate.name}" is already saved with feed URL: '
                    f"{duplicate.feed_url}. No need to search or save again."
                ),
            )

        return DedupResult(
            is_duplicate=False,
            message=f'No duplicate found for "{name}". You can proceed with searching and saving.',
        )
