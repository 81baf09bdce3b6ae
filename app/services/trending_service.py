"""Trending podcasts ranked by play volume, cache-accelerated.

Read path (cache-aside):
1. Look up the ranked id list cached for the requested limit
2. Resolve the ids against the catalog, keeping order, published only
3. On a miss, a cache error, or nothing left after filtering, aggregate play
   events and write the resulting ids back with a TTL
"""

import logging
from datetime import timedelta
from typing import Optional

from app.config import settings
from app.models.pages import PodcastPage
from app.schemas.base import utcnow
from app.schemas.podcasts import Podcast
from app.services.context import DiscoveryContext
from app.utils.pagination import DEFAULT_TRENDING_LIMIT, MAX_TRENDING_LIMIT, clamp_limit

logger = logging.getLogger(__name__)

TRENDING_CACHE_KEY = "discovery:trending_podcasts"


def trending_cache_key(limit: int) -> str:
    """Cache key for a trending list of the given size.

    Each page size is cached separately; there is no shared range cache.
    """
    return f"{TRENDING_CACHE_KEY}:{limit}"


async def compute_trending(ctx: DiscoveryContext, limit: int) -> list[Podcast]:
    """Aggregate play events into the top `limit` published podcasts.

    Podcasts are ranked by play count, ties broken by ascending podcast id.
    Ranked podcasts that are not published are dropped, so fewer than `limit`
    items may come back. Store errors propagate.
    """
    since = None
    if settings.trending_window_days:
        since = utcnow() - timedelta(days=settings.trending_window_days)

    counts = await ctx.events.count_plays_by_podcast(since=since, limit=limit)
    return await ctx.catalog.get_podcasts_in_order([c.podcast_id for c in counts])


async def refresh_trending(ctx: DiscoveryContext, limit: int) -> list[Podcast]:
    """Recompute trending for `limit` and overwrite the cached ids.

    Empty results are not cached so the next request retries the aggregation.
    """
    items = await compute_trending(ctx, limit)
    if items:
        await ctx.cache.put_ids(
            trending_cache_key(limit),
            [podcast.id for podcast in items],  # type: ignore[misc]
            settings.trending_cache_ttl_seconds,
        )
    return items


async def get_trending(
    ctx: DiscoveryContext,
    limit: Optional[int] = None,
) -> PodcastPage:
    """Return the most played published podcasts.

    Args:
        ctx: Discovery stores and cache
        limit: Requested list size (clamped to MAX_TRENDING_LIMIT)

    Returns:
        PodcastPage whose total is the number of resolved items
    """
    limit = clamp_limit(limit, maximum=MAX_TRENDING_LIMIT, default=DEFAULT_TRENDING_LIMIT)
    key = trending_cache_key(limit)

    cached_ids = await ctx.cache.get_ids(key)
    if cached_ids:
        items = await ctx.catalog.get_podcasts_in_order(cached_ids)
        if items:
            return PodcastPage(items=items, total=len(items))
        logger.info(f"Cached trending ids for {key} no longer resolve; recomputing")

    items = await refresh_trending(ctx, limit)
    return PodcastPage(items=items, total=len(items))
