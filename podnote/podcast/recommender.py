"""Rank recent episodes of saved podcasts with an LLM."""

from __future__ import annotations

from podnote.config import RecommendationConfig
from podnote.gateway import CommandResult, ErrorKind
from podnote.podcast.models import Episode, FeedError
from podnote.podcast.rss import FeedFetcher
from podnote.podcast.store import PodcastStore
from podnote.providers import LLMProvider
from podnote.utils import get_logger

logger = get_logger(__name__)


def format_episode(episode: Episode, index: int) -> str:
    description = " ".join(episode.description.split())
    return (
        f"## [Candidate Podcast {index}]\n"
        f"Title: {episode.title}\n"
        f"Show: {episode.podcast_name}\n"
        f"Date: {episode.pub_date:%Y-%m-%d}\n"
        f"Duration: {episode.duration or 'N/A'}\n"
        f"Description: {description}"
    )


def build_ranking_prompt(
    episodes: list[Episode],
    top_n: int,
    default_criteria: str,
    criteria: str | None = None,
) -> str:
    """Prompt asking the model to pick the best ``top_n`` episodes."""
    episode_list = "\n\n".join(format_episode(ep, i) for i, ep in enumerate(episodes))
    extra = ""
    if criteria:
        extra = (
            "\n\n# Prioritize the following Criteria as it is specified by the user directly:\n"
            f"{criteria}"
        )

    return (
        "You are a podcast recommendation assistant. Given the following list of recent "
        f"podcast episodes, recommend the top {top_n} episodes.\n\n"
        f"# Default Ranking Criteria:\n{default_criteria}{extra}\n\n"
        "# Candidate Episodes (The episode's spoken language is the same as the title/description):\n"
        f"{episode_list}\n\n"
        "# Output\n"
        f"Recommend the {top_n} best episodes. For each, explain concisely why it's worth "
        "listening to. Return in bullet points."
    )


def _error_summary(errors: list[FeedError]) -> str:
    return "; ".join(e.error for e in errors)


class EpisodeRecommender:
    """Collect recent episodes from saved feeds and ask the LLM to rank them.

    Example:
        >>> recommender = EpisodeRecommender(store, fetcher, provider, config)
        >>> result = await recommender.recommend(top_n=3, days=30)
    """

    def __init__(
        self,
        store: PodcastStore,
        fetcher: FeedFetcher,
        provider: LLMProvider | None,
        config: RecommendationConfig,
    ):
        self.store = store
        self.fetcher = fetcher
        self.provider = provider
        self.config = config

    async def recommend(
        self,
        top_n: int | None = None,
        days: int | None = None,
        criteria: str | None = None,
    ) -> CommandResult:
        top_n = top_n or self.config.default_top_n
        days = days or self.config.default_days

        podcasts = await self.store.load()
        if not podcasts:
            return CommandResult.fail(
                "No podcasts saved yet. Use 'podcast save' to add some podcasts first.",
                ErrorKind.NOT_FOUND,
            )

        feeds = await self.fetcher.fetch_all_episodes(podcasts, days)
        if not feeds.episodes:
            error_info = f" Errors: {_error_summary(feeds.errors)}" if feeds.errors else ""
            return CommandResult.fail(
                f"No episodes found in the last {days} days.{error_info}",
                ErrorKind.NOT_FOUND,
            )

        if self.provider is None:
            return CommandResult.fail("LLM ranking failed: no LLM provider configured", ErrorKind.UPSTREAM)

        prompt = build_ranking_prompt(feeds.episodes, top_n, self.config.default_criteria, criteria)
        logger.info(
            "Ranking episodes",
            extra={"candidates": len(feeds.episodes), "top_n": top_n, "days": days},
        )

        try:
            ranking = await self.provider.complete(prompt)
        except Exception as e:
            logger.error(f"LLM ranking failed: {e}")
            return CommandResult.fail(f"LLM ranking failed: {e}", ErrorKind.UPSTREAM)

        output = ranking
        if feeds.errors:
            output += f"\n\n[Feed Errors: {_error_summary(feeds.errors)}]"
        return CommandResult.ok(output)
