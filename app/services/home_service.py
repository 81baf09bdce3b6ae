"""Home screen composed from the discovery building blocks.

Sections are loaded concurrently and independently. A failing section is
logged and rendered empty so one broken source never blanks the whole page.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from app.models.discovery import (
    ContinueListeningItem,
    EpisodeRead,
    HomeResponse,
    PodcastRead,
)
from app.services.catalog_service import get_new_releases
from app.services.context import DiscoveryContext
from app.services.discovery_mapping import (
    continue_listening_items,
    episode_reads,
    podcast_reads,
)
from app.services.featured_service import get_featured
from app.services.recommendation_service import get_recommendations
from app.utils.pagination import MAX_RECOMMENDATION_LIMIT, clamp_limit

logger = logging.getLogger(__name__)

DEFAULT_HOME_SECTION_LIMIT = 6

T = TypeVar("T")


async def _section(name: str, loader: Awaitable[list[T]]) -> list[T]:
    try:
        return await loader
    except Exception:
        logger.exception(f"Home section '{name}' failed; rendering it empty")
        return []


async def _featured(ctx: DiscoveryContext, limit: int) -> list[PodcastRead]:
    page = await get_featured(ctx)
    return await podcast_reads(ctx, page.items[:limit])


async def _latest(ctx: DiscoveryContext, limit: int) -> list[EpisodeRead]:
    page = await get_new_releases(ctx, limit=limit)
    return await episode_reads(ctx, page.items)


async def _continue_listening(
    ctx: DiscoveryContext, user_id: Optional[int], limit: int
) -> list[ContinueListeningItem]:
    if user_id is None:
        return []
    progress = await ctx.events.list_recent_progress(user_id, limit)
    if not progress:
        return []
    episodes = await ctx.catalog.get_episodes(
        [p.episode_id for p in progress], published_only=True
    )
    by_id = {e.id: e for e in episodes}
    ordered = [by_id[p.episode_id] for p in progress if p.episode_id in by_id]
    positions = {p.episode_id: p.position_seconds for p in progress}
    return await continue_listening_items(ctx, ordered, positions)


async def _recommendations(
    ctx: DiscoveryContext, user_id: Optional[int], limit: int
) -> list[PodcastRead]:
    page = await get_recommendations(ctx, user_id, limit=limit)
    return await podcast_reads(ctx, page.items)


async def get_home(
    ctx: DiscoveryContext,
    user_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> HomeResponse:
    """Build the home screen for a listener.

    Args:
        ctx: Discovery stores and cache
        user_id: Listener id; anonymous callers get no continue-listening
            section and trending in place of recommendations
        limit: Items per section (clamped to [1, MAX_RECOMMENDATION_LIMIT])

    Returns:
        HomeResponse with featured, latest, continue_listening and
        recommendations sections
    """
    limit = clamp_limit(
        limit, maximum=MAX_RECOMMENDATION_LIMIT, default=DEFAULT_HOME_SECTION_LIMIT
    )

    featured, latest, continue_listening, recommendations = await asyncio.gather(
        _section("featured", _featured(ctx, limit)),
        _section("latest", _latest(ctx, limit)),
        _section("continue_listening", _continue_listening(ctx, user_id, limit)),
        _section("recommendations", _recommendations(ctx, user_id, limit)),
    )
    return HomeResponse(
        featured=featured,
        latest=latest,
        continue_listening=continue_listening,
        recommendations=recommendations,
    )
