"""Featured shelf: curated list, else trending, else newest podcasts."""

import logging

from app.models.pages import PodcastPage
from app.services.context import DiscoveryContext
from app.services.trending_service import get_trending
from app.utils.pagination import FEATURED_LIMIT

logger = logging.getLogger(__name__)


async def get_featured(ctx: DiscoveryContext) -> PodcastPage:
    """Resolve the featured shelf.

    Each tier is consulted only when the previous one is empty:

    1. Admin-curated FeaturedPodcast rows in display order, published only
    2. Trending podcasts
    3. Newest published podcasts

    Returns:
        PodcastPage of at most FEATURED_LIMIT podcasts
    """
    featured_ids = await ctx.catalog.list_featured_podcast_ids(FEATURED_LIMIT)
    if featured_ids:
        items = await ctx.catalog.get_podcasts_in_order(featured_ids)
        if items:
            return PodcastPage(items=items, total=len(items))

    trending = await get_trending(ctx, FEATURED_LIMIT)
    if trending.items:
        logger.debug("Featured list empty; serving trending")
        return trending

    logger.debug("Featured list and trending empty; serving newest podcasts")
    items = await ctx.catalog.newest_podcasts(FEATURED_LIMIT)
    return PodcastPage(items=items, total=len(items))
