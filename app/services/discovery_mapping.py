"""Convert catalog rows into API response models.

Lookups needed for display (category names, parent podcast title and cover)
are batched per list, never per row.
"""

from typing import Optional, Sequence

from app.config import settings
from app.models.discovery import (
    CategorySummary,
    ContinueListeningItem,
    EpisodeListResponse,
    EpisodeRead,
    PodcastListResponse,
    PodcastRead,
    SearchResponse,
)
from app.models.pages import EpisodePage, PodcastPage, SearchPage
from app.schemas.categories import Category
from app.schemas.episodes import Episode
from app.schemas.podcasts import Podcast
from app.services.context import DiscoveryContext


def format_duration(seconds: int | None) -> str:
    """Convert duration in seconds to a human-readable string.

    Args:
        seconds: Duration in seconds, or None if unknown

    Returns:
        Formatted string like "45:23" or "1:02:03", or "" if unknown
    """
    if seconds is None or seconds < 0:
        return ""
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def build_rss_url(podcast_id: int) -> str:
    """Public RSS feed URL for a podcast."""
    return f"{settings.public_api_base_url.rstrip('/')}/podcasts/{podcast_id}/rss"


def to_podcast_read(
    podcast: Podcast, categories_by_id: Optional[dict[int, Category]] = None
) -> PodcastRead:
    categories_by_id = categories_by_id or {}
    return PodcastRead(
        id=podcast.id,  # type: ignore[arg-type]
        owner_id=podcast.owner_id,
        title=podcast.title,
        description=podcast.description,
        categories=[
            CategorySummary(id=cat.id, slug=cat.slug, name=cat.name)  # type: ignore[arg-type]
            for cid in podcast.category_ids
            if (cat := categories_by_id.get(cid)) is not None
        ],
        tags=list(podcast.tags),
        cover_url=podcast.cover_url,
        language=podcast.language,
        status=podcast.status.value,
        explicit=podcast.explicit,
        episode_order=podcast.episode_order.value,
        website_url=podcast.website_url,
        rss_url=build_rss_url(podcast.id),  # type: ignore[arg-type]
        created_at=podcast.created_at.isoformat(),
        updated_at=podcast.updated_at.isoformat(),
    )


def to_episode_read(
    episode: Episode, podcast: Optional[Podcast] = None
) -> EpisodeRead:
    return EpisodeRead(
        id=episode.id,  # type: ignore[arg-type]
        podcast_id=episode.podcast_id,
        podcast_title=podcast.title if podcast else None,
        title=episode.title,
        description=episode.description,
        duration_seconds=episode.duration_seconds,
        duration=format_duration(episode.duration_seconds),
        season_number=episode.season_number,
        episode_number=episode.episode_number,
        cover_url=episode.cover_url or (podcast.cover_url if podcast else None),
        audio_url=episode.audio_url,
        status=episode.status.value,
        published_at=episode.published_at.isoformat() if episode.published_at else None,
        created_at=episode.created_at.isoformat(),
    )


async def podcast_reads(
    ctx: DiscoveryContext, podcasts: Sequence[Podcast]
) -> list[PodcastRead]:
    """Map podcasts to responses with one category lookup for the whole list."""
    if not podcasts:
        return []
    category_ids = sorted({cid for p in podcasts for cid in p.category_ids})
    categories = await ctx.catalog.get_categories(category_ids)
    by_id = {cat.id: cat for cat in categories}
    return [to_podcast_read(p, by_id) for p in podcasts]  # type: ignore[arg-type]


async def _parent_podcasts(
    ctx: DiscoveryContext, episodes: Sequence[Episode]
) -> dict[int, Podcast]:
    podcast_ids = sorted({e.podcast_id for e in episodes})
    podcasts = await ctx.catalog.get_podcasts(podcast_ids, published_only=False)
    return {p.id: p for p in podcasts}  # type: ignore[misc]


async def episode_reads(
    ctx: DiscoveryContext, episodes: Sequence[Episode]
) -> list[EpisodeRead]:
    """Map episodes to responses, attaching parent title and cover fallback."""
    if not episodes:
        return []
    parents = await _parent_podcasts(ctx, episodes)
    return [to_episode_read(e, parents.get(e.podcast_id)) for e in episodes]


async def continue_listening_items(
    ctx: DiscoveryContext,
    episodes: Sequence[Episode],
    positions: dict[int, int],
) -> list[ContinueListeningItem]:
    """Map in-progress episodes, attaching the listener's playback position."""
    reads = await episode_reads(ctx, episodes)
    return [
        ContinueListeningItem(
            **read.model_dump(), playback_position=positions.get(read.id, 0)
        )
        for read in reads
    ]


async def podcast_list_response(
    ctx: DiscoveryContext, page: PodcastPage
) -> PodcastListResponse:
    return PodcastListResponse(
        items=await podcast_reads(ctx, page.items), total=page.total
    )


async def episode_list_response(
    ctx: DiscoveryContext, page: EpisodePage
) -> EpisodeListResponse:
    return EpisodeListResponse(
        items=await episode_reads(ctx, page.items), total=page.total
    )


async def search_response(ctx: DiscoveryContext, page: SearchPage) -> SearchResponse:
    return SearchResponse(
        podcasts=await podcast_reads(ctx, page.podcasts),
        episodes=await episode_reads(ctx, page.episodes),
    )
