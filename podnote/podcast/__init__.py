"""Podcast subscriptions, discovery and episode recommendations."""

from podnote.podcast.commands import PodcastCommands
from podnote.podcast.itunes import ITunesClient
from podnote.podcast.models import DedupResult, Episode, FeedError, FeedResult, PodcastEntry, SearchResult
from podnote.podcast.recommender import EpisodeRecommender
from podnote.podcast.rss import FeedFetcher
from podnote.podcast.store import PodcastStore

__all__ = [
    "DedupResult",
    "Episode",
    "EpisodeRecommender",
    "FeedError",
    "FeedFetcher",
    "FeedResult",
    "ITunesClient",
    "PodcastCommands",
    "PodcastEntry",
    "PodcastStore",
    "SearchResult",
]
