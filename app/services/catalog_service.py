"""Catalog browsing, text search and new releases over published content."""

import asyncio
import logging
import re
from typing import Optional, Sequence

from app.models.fields import SearchType
from app.models.pages import EpisodePage, PodcastPage, SearchPage
from app.schemas.episodes import Episode
from app.schemas.podcasts import Podcast
from app.services.context import DiscoveryContext
from app.stores.base import PodcastFilter, TextSearchUnavailableError
from app.utils.pagination import clamp_limit, clamp_offset

logger = logging.getLogger(__name__)

_QUERY_SEPARATORS = re.compile(r"[-\s]+")


class SearchQueryRequiredError(ValueError):
    """Raised when search is called without a usable query."""

    def __init__(self) -> None:
        super().__init__("Search query (q) is required")


def normalize_search_query(query: Optional[str]) -> str:
    """Collapse runs of hyphens and whitespace into single spaces.

    Args:
        query: Raw user query

    Returns:
        Normalized query, "" when nothing searchable remains
    """
    if not query:
        return ""
    return _QUERY_SEPARATORS.sub(" ", query).strip()


def _clean_tags(tags: Optional[Sequence[str]]) -> tuple[str, ...]:
    if not tags:
        return ()
    return tuple(dict.fromkeys(t.strip() for t in tags if t and t.strip()))


async def browse(
    ctx: DiscoveryContext,
    category_id: Optional[int] = None,
    subcategory_id: Optional[int] = None,
    tags: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> PodcastPage:
    """List published podcasts, most recently updated first.

    Args:
        ctx: Discovery stores and cache
        category_id: Only podcasts in this category
        subcategory_id: Only podcasts also in this subcategory
        tags: Only podcasts carrying at least one of these tags
        limit: Page size (clamped to MAX_PAGE_LIMIT)
        offset: Number of podcasts to skip

    Returns:
        PodcastPage with the exact number of matching podcasts as total
    """
    limit = clamp_limit(limit)
    offset = clamp_offset(offset)
    filters = PodcastFilter(
        category_ids=tuple(c for c in (category_id, subcategory_id) if c is not None),
        tags=_clean_tags(tags),
    )

    items, total = await asyncio.gather(
        ctx.catalog.list_podcasts(filters, limit=limit, offset=offset),
        ctx.catalog.count_podcasts(filters),
    )
    return PodcastPage(items=items, total=total)


async def search(
    ctx: DiscoveryContext,
    query: Optional[str],
    search_type: SearchType = SearchType.all,
    tags: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> SearchPage:
    """Full-text search over published podcasts and episodes.

    Token matching is delegated to the catalog's text index. If that index is
    not available the result is empty rather than an error; every other store
    failure propagates.

    Raises:
        SearchQueryRequiredError: If query is missing or blank
    """
    normalized = normalize_search_query(query)
    if not normalized:
        raise SearchQueryRequiredError()

    limit = clamp_limit(limit)
    offset = clamp_offset(offset)
    tag_filter = _clean_tags(tags)

    async def _podcasts() -> list[Podcast]:
        if not search_type.includes_podcasts:
            return []
        return await ctx.catalog.search_podcasts(normalized, tag_filter, limit, offset)

    async def _episodes() -> list[Episode]:
        if not search_type.includes_episodes:
            return []
        return await ctx.catalog.search_episodes(normalized, tag_filter, limit, offset)

    results = await asyncio.gather(_podcasts(), _episodes(), return_exceptions=True)

    # A missing text index only fails open once no other store error is pending.
    for result in results:
        if isinstance(result, BaseException) and not isinstance(
            result, TextSearchUnavailableError
        ):
            raise result
    for result in results:
        if isinstance(result, TextSearchUnavailableError):
            logger.warning(f"Text search unavailable, returning no results: {result}")
            return SearchPage()

    podcasts, episodes = results
    return SearchPage(podcasts=podcasts, episodes=episodes)  # type: ignore[arg-type]


async def get_new_releases(
    ctx: DiscoveryContext,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> EpisodePage:
    """Published episodes, newest release first (creation time breaks ties)."""
    limit = clamp_limit(limit)
    offset = clamp_offset(offset)

    items, total = await asyncio.gather(
        ctx.catalog.list_new_episodes(limit=limit, offset=offset),
        ctx.catalog.count_new_episodes(),
    )
    return EpisodePage(items=items, total=total)
