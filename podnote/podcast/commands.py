"""``podcast ...`` gateway commands."""

from __future__ import annotations

import httpx

from podnote.gateway import (
    CommandHandler,
    CommandResult,
    ErrorKind,
    parse_options,
    parse_two_args,
    raw_arguments,
)
from podnote.podcast.itunes import ITunesClient, format_results
from podnote.podcast.recommender import EpisodeRecommender
from podnote.podcast.store import PODCASTS_FILE, PodcastStore
from podnote.utils import get_logger

logger = get_logger(__name__)

PODCAST_HELP = """\
## Podcast Commands

- podcast list                   - List saved podcasts
- podcast search <query>         - Search iTunes for podcasts
- podcast save "<name>" "<url>"  - Save a podcast to the working folder
- podcast check <name>           - Check if podcast already saved
- podcast recommend [opts]       - Get episode recommendations

Options for recommend:
  topN=<number>     Number of episodes (default: 3)
  days=<number>     Days to look back (default: 90)
  criteria="<text>" Additional filtering criteria"""


def _int_option(options: dict[str, str], key: str) -> int | None:
    value = options.get(key, "")
    return int(value) if value.isdigit() else None


class PodcastCommands:
    """Handlers for the podcast command family."""

    def __init__(
        self,
        store: PodcastStore,
        itunes: ITunesClient,
        recommender: EpisodeRecommender,
    ):
        self.store = store
        self.itunes = itunes
        self.recommender = recommender

    def commands(self) -> dict[str, CommandHandler]:
        return {
            "podcast help": self.help,
            "podcast list": self.list_podcasts,
            "podcast search": self.search,
            "podcast save": self.save,
            "podcast check": self.check,
            "podcast recommend": self.recommend,
        }

    def help(self, args: str) -> CommandResult:
        return CommandResult.ok(PODCAST_HELP)

    async def list_podcasts(self, args: str) -> CommandResult:
        podcasts = await self.store.load()
        if not podcasts:
            return CommandResult.ok("No podcasts saved yet.")
        return CommandResult.ok("\n\n".join(f"- {p.name}\n  {p.feed_url}" for p in podcasts))

    async def search(self, query: str) -> CommandResult:
        if not query:
            return CommandResult.usage("podcast search <query>")
        try:
            results = await self.itunes.search(query)
        except httpx.HTTPError as e:
            logger.warning("iTunes search failed", extra={"query": query, "error": str(e)})
            return CommandResult.fail(f"Podcast search failed: {e}", ErrorKind.UPSTREAM)
        return CommandResult.ok(format_results(query, results))

    @raw_arguments
    async def save(self, args: str) -> CommandResult:
        if not args.strip():
            return CommandResult.usage('podcast save "<name>" "<feedUrl>"')
        parsed = parse_two_args(args)
        if parsed is None or not parsed[0].strip() or not parsed[1].strip():
            return CommandResult.usage(
                'podcast save "<name>" "<feedUrl>". Both name and URL must be quoted.'
            )

        name, feed_url = parsed
        dedup = await self.store.check_and_dedup(name)
        if dedup.is_duplicate:
            return CommandResult.fail(dedup.message, ErrorKind.CONFLICT)

        await self.store.append(name, feed_url)
        return CommandResult.ok(f'Saved "{name}" to {PODCASTS_FILE}')

    async def check(self, name: str) -> CommandResult:
        if not name:
            return CommandResult.usage("podcast check <name>")
        result = await self.store.check_and_dedup(name)
        return CommandResult.ok(result.message)

    @raw_arguments
    async def recommend(self, args: str) -> CommandResult:
        options = parse_options(args)
        return await self.recommender.recommend(
            top_n=_int_option(options, "topN"),
            days=_int_option(options, "days"),
            criteria=options.get("criteria") or None,
        )
