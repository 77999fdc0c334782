"""Data models for podcasts, episodes and search results."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PodcastEntry(BaseModel):
    """A saved podcast subscription."""
    name: str
    feed_url: str


class DedupResult(BaseModel):
    """Outcome of a duplicate check against saved podcasts."""
    is_duplicate: bool
    existing: PodcastEntry | None = None
    message: str


class SearchResult(BaseModel):
    """One podcast returned by the iTunes directory."""
    name: str
    artist: str
    feed_url: str


class Episode(BaseModel):
    """A recent episode pulled from a podcast feed."""
    title: str
    description: str
    pub_date: datetime
    duration: str | None = None
    podcast_name: str


class FeedError(BaseModel):
    feed_url: str
    error: str


class FeedResult(BaseModel):
    """Episodes collected from one or more feeds plus any per-feed failures."""
    episodes: list[Episode]
    errors: list[FeedError] = Field(default_factory=list)
