"""Pydantic response models for the discovery endpoints."""

from typing import Optional

from sqlmodel import SQLModel


class CategorySummary(SQLModel):
    """Category reference embedded in podcast responses."""

    id: int
    slug: str
    name: str


class PodcastRead(SQLModel):
    """Response model for a podcast in any discovery list."""

    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    categories: list[CategorySummary] = []
    tags: list[str] = []
    cover_url: str
    language: str
    status: str
    explicit: bool
    episode_order: str
    website_url: Optional[str] = None
    rss_url: str
    created_at: str  # ISO format string
    updated_at: str  # ISO format string


class EpisodeRead(SQLModel):
    """Response model for an episode in search results and new releases."""

    id: int
    podcast_id: int
    podcast_title: Optional[str] = None
    title: str
    description: Optional[str] = None
    duration_seconds: int
    duration: str  # Formatted "45:23" or "1:02:03"
    season_number: Optional[int] = None
    episode_number: Optional[int] = None
    cover_url: Optional[str] = None  # Falls back to the podcast cover
    audio_url: str
    status: str
    published_at: Optional[str] = None
    created_at: str


class ContinueListeningItem(EpisodeRead):
    """Episode the listener has started, with their last position."""

    playback_position: int = 0  # seconds


class PodcastListResponse(SQLModel):
    """Response model for podcast lists (browse, trending, featured, recommendations)."""

    items: list[PodcastRead]
    total: int


class EpisodeListResponse(SQLModel):
    """Response model for episode lists (new releases)."""

    items: list[EpisodeRead]
    total: int


class SearchResponse(SQLModel):
    """Response model for text search across podcasts and episodes."""

    podcasts: list[PodcastRead]
    episodes: list[EpisodeRead]


class HomeResponse(SQLModel):
    """Response model for the composed home screen."""

    featured: list[PodcastRead]
    latest: list[EpisodeRead]
    continue_listening: list[ContinueListeningItem]
    recommendations: list[PodcastRead]
