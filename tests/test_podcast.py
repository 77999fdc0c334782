"""Tests for podcast storage, discovery and recommendations."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import httpx
import pytest

from podnote.config import RecommendationConfig
from podnote.gateway import ErrorKind, create_command_executor
from podnote.podcast import (
    EpisodeRecommender,
    FeedFetcher,
    ITunesClient,
    PodcastCommands,
    PodcastEntry,
    PodcastStore,
)
from podnote.podcast.itunes import detect_country
from podnote.podcast.recommender import build_ranking_prompt
from podnote.podcast.rss import parse_episodes
from podnote.providers import LLMProvider, LLMResponse

NOW = datetime.now(timezone.utc)


def rss(title: str, items: list[tuple[str, datetime, str]]) -> str:
    entries = "".join(
        f"<item><title>{t}</title><pubDate>{format_datetime(d)}</pubDate>"
        f"<description><![CDATA[{desc}]]></description>"
        f"<itunes:duration>42:00</itunes:duration></item>"
        for t, d, desc in items
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">'
        f"<channel><title>{title}</title>{entries}</channel></rss>"
    )


FEEDS = {
    "https://feeds.example.com/fork": rss("Hard Fork", [
        ("Old news", NOW - timedelta(days=200), "stale"),
        ("AI agents", NOW - timedelta(days=2), "<p>Agents <b>everywhere</b></p>"),
    ]),
    "https://feeds.example.com/history": rss("History", [
        ("Rome", NOW - timedelta(days=1), "Empire"),
    ]),
}

ITUNES_RESULTS = {
    "results": [
        {"collectionName": "Hard Fork", "artistName": "NYT", "feedUrl": "https://feeds.example.com/fork"},
        {"collectionName": "No Feed", "artistName": "Nobody"},
    ]
}


class FakeHTTP:
    """Serves iTunes search results and RSS feeds."""

    def __init__(self):
        self.itunes_params: list[dict] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        if url == "https://itunes.apple.com/search":
            self.itunes_params.append(dict(request.url.params))
            return httpx.Response(200, json=ITUNES_RESULTS)
        if url in FEEDS:
            return httpx.Response(200, text=FEEDS[url])
        return httpx.Response(500, text="boom")


class FakeProvider(LLMProvider):
    provider_name = "fake"
    model = "fake-model"

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.prompts: list[str] = []

    async def chat(self, messages, system=None, temperature=None, max_tokens=None) -> LLMResponse:
        self.prompts.append(messages[-1]["content"])
        if self.fail:
            raise RuntimeError("rate limited")
        return LLMResponse(content="- Rome: great history")


@pytest.fixture
def fake_http() -> FakeHTTP:
    return FakeHTTP()


@pytest.fixture
def transport(fake_http) -> httpx.MockTransport:
    return httpx.MockTransport(fake_http.handle)


@pytest.fixture
def store(any_fs) -> PodcastStore:
    return PodcastStore(any_fs)


class TestPodcastStore:
    """Tests for podcasts.yaml handling."""

    @pytest.mark.asyncio
    async def test_empty(self, store):
        assert await store.load() == []
        result = await store.check_and_dedup("Hard Fork")
        assert result.is_duplicate is False
        assert result.message == "No podcasts saved yet. You can proceed with searching and saving."

    @pytest.mark.asyncio
    async def test_append_and_duplicate_check(self, store):
        await store.append("Hard Fork", "https://feeds.example.com/fork")

        result = await store.check_and_dedup("  hard fork ")
        assert result.is_duplicate is True
        assert result.message == (
            'Podcast "Hard Fork" is already saved with feed URL: '
            "https://feeds.example.com/fork. No need to search or save again."
        )

        other = await store.check_and_dedup("History")
        assert other.message == 'No duplicate found for "History". You can proceed with searching and saving.'

    @pytest.mark.asyncio
    async def test_duplicate_feeds_removed(self, store, any_fs):
        await any_fs.write_file(
            "podcasts.yaml",
            "podcasts:\n"
            "  - name: Hard Fork\n"
            "    feed_url: https://feeds.example.com/fork\n"
            "  - name: Hard Fork Again\n"
            "    feed_url: HTTPS://feeds.example.com/fork\n"
            "  - name: History\n"
            "    feed_url: https://feeds.example.com/history\n",
        )

        await store.check_and_dedup("anything")

        assert [p.name for p in await store.load()] == ["Hard Fork", "History"]

    @pytest.mark.parametrize("content", ["- just a list\n", "plain text\n", "podcasts: not-a-list\n"])
    @pytest.mark.asyncio
    async def test_malformed_file_loads_empty(self, store, any_fs, content):
        await any_fs.write_file("podcasts.yaml", content)

        assert await store.load() == []
        result = await store.check_and_dedup("Hard Fork")
        assert result.is_duplicate is False


class TestITunes:
    def test_detect_country(self):
        assert detect_country("Hard Fork") == "US"
        assert detect_country("得到") == "CN"

    @pytest.mark.asyncio
    async def test_search(self, transport, fake_http):
        client = ITunesClient(transport=transport)
        results = await client.search("hard fork")

        assert [r.name for r in results] == ["Hard Fork"]
        assert fake_http.itunes_params == [
            {"term": "hard fork", "entity": "podcast", "limit": "5", "country": "US"}
        ]


class TestFeeds:
    """Tests for RSS parsing and fetching."""

    def test_parse_window_and_cleanup(self):
        config = RecommendationConfig(max_description_length=10)
        episodes = parse_episodes(FEEDS["https://feeds.example.com/fork"], "Hard Fork", 90, config)

        assert [e.title for e in episodes] == ["AI agents"]
        assert episodes[0].description == "Agents eve..."
        assert episodes[0].duration == "42:00"
        assert episodes[0].podcast_name == "Hard Fork"

    def test_max_episodes_per_feed(self):
        items = [(f"Ep {i}", NOW - timedelta(hours=i), "x") for i in range(5)]
        config = RecommendationConfig(max_episodes_per_feed=3)
        episodes = parse_episodes(rss("Daily", items), "Daily", 90, config)
        assert [e.title for e in episodes] == ["Ep 0", "Ep 1", "Ep 2"]

    @pytest.mark.asyncio
    async def test_fetch_all_sorted_with_errors(self, transport):
        fetcher = FeedFetcher(RecommendationConfig(), transport=transport)
        result = await fetcher.fetch_all_episodes(
            [
                PodcastEntry(name="Hard Fork", feed_url="https://feeds.example.com/fork"),
                PodcastEntry(name="History", feed_url="https://feeds.example.com/history"),
                PodcastEntry(name="Broken", feed_url="https://feeds.example.com/broken"),
            ],
            days=90,
        )

        assert [e.title for e in result.episodes] == ["Rome", "AI agents"]
        assert [e.feed_url for e in result.errors] == ["https://feeds.example.com/broken"]


class TestRecommender:
    def test_prompt_contains_criteria(self):
        config = RecommendationConfig()
        episodes = parse_episodes(FEEDS["https://feeds.example.com/history"], "History", 90, config)
        prompt = build_ranking_prompt(episodes, 2, "Default rules", "Only Rome")

        assert "recommend the top 2 episodes" in prompt
        assert "# Default Ranking Criteria:\nDefault rules" in prompt
        assert "Only Rome" in prompt
        assert "## [Candidate Podcast 0]\nTitle: Rome\nShow: History" in prompt

    @pytest.mark.asyncio
    async def test_no_podcasts(self, store, transport):
        recommender = EpisodeRecommender(
            store, FeedFetcher(RecommendationConfig(), transport=transport), FakeProvider(), RecommendationConfig()
        )
        result = await recommender.recommend()
        assert result.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_llm_failure_is_upstream(self, store, transport):
        await store.append("History", "https://feeds.example.com/history")
        recommender = EpisodeRecommender(
            store,
            FeedFetcher(RecommendationConfig(), transport=transport),
            FakeProvider(fail=True),
            RecommendationConfig(),
        )
        result = await recommender.recommend()
        assert result.kind == ErrorKind.UPSTREAM
        assert result.output == "LLM ranking failed: rate limited"


class TestPodcastCommands:
    """End-to-end podcast commands through the gateway."""

    @pytest.fixture
    def provider(self) -> FakeProvider:
        return FakeProvider()

    @pytest.fixture
    def executor(self, store, transport, provider):
        config = RecommendationConfig()
        recommender = EpisodeRecommender(
            store, FeedFetcher(config, transport=transport), provider, config
        )
        commands = PodcastCommands(store, ITunesClient(transport=transport), recommender)
        return create_command_executor(commands.commands())

    @pytest.mark.asyncio
    async def test_save_list_check(self, executor):
        assert await executor.run('podcast save "History" "https://feeds.example.com/history"') == (
            'Saved "History" to podcasts.yaml'
        )
        assert await executor.run("podcast list") == "- History\n  https://feeds.example.com/history"
        assert (await executor.run("podcast check history")).startswith('Podcast "History" is already saved')

    @pytest.mark.asyncio
    async def test_save_duplicate(self, executor):
        await executor.run('podcast save "History" "https://feeds.example.com/history"')
        result = await executor.execute('podcast save "history" "https://other.example.com/rss"')
        assert result.success is False
        assert result.render().startswith('Error: Podcast "History" is already saved')

    @pytest.mark.asyncio
    async def test_save_requires_quotes(self, executor):
        result = await executor.execute("podcast save History https://feeds.example.com/history")
        assert result.kind == ErrorKind.USAGE

    @pytest.mark.asyncio
    async def test_list_empty(self, executor):
        assert await executor.run("podcast list") == "No podcasts saved yet."

    @pytest.mark.asyncio
    async def test_search(self, executor):
        assert await executor.run("podcast search hard fork") == (
            "1. Hard Fork by NYT\n   Feed: https://feeds.example.com/fork"
        )

    @pytest.mark.asyncio
    async def test_search_requires_query(self, executor):
        assert await executor.run("podcast search") == "Error: Usage: podcast search <query>"

    @pytest.mark.asyncio
    async def test_recommend_with_options_and_feed_errors(self, executor, store, provider):
        await store.append("History", "https://feeds.example.com/history")
        await store.append("Broken", "https://feeds.example.com/broken")

        output = await executor.run('podcast recommend topN=1 days=30 criteria="Only Rome"')

        assert output.startswith("- Rome: great history\n\n[Feed Errors: ")
        assert "recommend the top 1 episodes" in provider.prompts[0]
        assert "Only Rome" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_help(self, executor):
        assert "## Podcast Commands" in await executor.run("podcast help")
