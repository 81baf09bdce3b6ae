"""Discovery API routes.

Provides endpoints for:
- Browsing published podcasts by category, subcategory and tags
- Full-text search over podcasts and episodes
- Trending, featured and newly released content
- Personalized recommendations for the calling listener
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.models.discovery import (
    EpisodeListResponse,
    PodcastListResponse,
    SearchResponse,
)
from app.routes.helpers import (
    get_discovery_context,
    parse_search_type,
    parse_tags,
    require_user_id,
)
from app.services import catalog_service
from app.services.catalog_service import SearchQueryRequiredError
from app.services.context import DiscoveryContext
from app.services.discovery_mapping import (
    episode_list_response,
    podcast_list_response,
    search_response,
)
from app.services.featured_service import get_featured
from app.services.recommendation_service import get_recommendations
from app.services.trending_service import get_trending

router = APIRouter(prefix="/api/v1/discovery", tags=["discovery"])


@router.get("/browse", response_model=PodcastListResponse)
async def browse_podcasts(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    subcategory_id: Optional[int] = Query(default=None, alias="subcategoryId"),
    tags: Optional[list[str]] = Query(default=None, description="Tags, comma separated or repeated"),
    limit: Optional[int] = Query(default=None, description="Items per page (max 100)"),
    offset: Optional[int] = Query(default=None, description="Number of items to skip"),
    ctx: DiscoveryContext = Depends(get_discovery_context),
) -> PodcastListResponse:
    """Browse published podcasts, most recently updated first."""
    page = await catalog_service.browse(
        ctx,
        category_id=category_id,
        subcategory_id=subcategory_id,
        tags=parse_tags(tags),
        limit=limit,
        offset=offset,
    )
    return await podcast_list_response(ctx, page)


@router.get("/search", response_model=SearchResponse)
async def search_catalog(
    q: Optional[str] = Query(default=None, description="Search query"),
    search_type: Optional[str] = Query(
        default=None, alias="type", description="podcast, episode or all (default)"
    ),
    tags: Optional[list[str]] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    offset: Optional[int] = Query(default=None),
    ctx: DiscoveryContext = Depends(get_discovery_context),
) -> SearchResponse:
    """Search published podcasts and episodes by text."""
    try:
        page = await catalog_service.search(
            ctx,
            q,
            search_type=parse_search_type(search_type),
            tags=parse_tags(tags),
            limit=limit,
            offset=offset,
        )
    except SearchQueryRequiredError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return await search_response(ctx, page)


@router.get("/trending", response_model=PodcastListResponse)
async def trending_podcasts(
    limit: Optional[int] = Query(default=None, description="List size (max 50)"),
    ctx: DiscoveryContext = Depends(get_discovery_context),
) -> PodcastListResponse:
    """Most played published podcasts."""
    page = await get_trending(ctx, limit)
    return await podcast_list_response(ctx, page)


@router.get("/new-releases", response_model=EpisodeListResponse)
async def new_releases(
    limit: Optional[int] = Query(default=None),
    offset: Optional[int] = Query(default=None),
    ctx: DiscoveryContext = Depends(get_discovery_context),
) -> EpisodeListResponse:
    """Newest published episodes."""
    page = await catalog_service.get_new_releases(ctx, limit=limit, offset=offset)
    return await episode_list_response(ctx, page)


@router.get("/featured", response_model=PodcastListResponse)
async def featured_podcasts(
    ctx: DiscoveryContext = Depends(get_discovery_context),
) -> PodcastListResponse:
    """Curated featured podcasts, falling back to trending, then newest."""
    page = await get_featured(ctx)
    return await podcast_list_response(ctx, page)


@router.get("/recommendations", response_model=PodcastListResponse)
async def recommended_podcasts(
    limit: Optional[int] = Query(default=None, description="Page size (max 50)"),
    offset: Optional[int] = Query(default=None),
    user_id: int = Depends(require_user_id),
    ctx: DiscoveryContext = Depends(get_discovery_context),
) -> PodcastListResponse:
    """Personalized podcasts for the calling listener."""
    page = await get_recommendations(ctx, user_id, limit=limit, offset=offset)
    return await podcast_list_response(ctx, page)
