"""Home screen route."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.models.discovery import HomeResponse
from app.routes.helpers import get_current_user_id, get_discovery_context
from app.services.context import DiscoveryContext
from app.services.home_service import get_home

router = APIRouter(prefix="/api/v1/home", tags=["home"])


@router.get("", response_model=HomeResponse)
async def home_screen(
    limit: Optional[int] = Query(default=None, description="Items per section (max 50)"),
    user_id: Optional[int] = Depends(get_current_user_id),
    ctx: DiscoveryContext = Depends(get_discovery_context),
) -> HomeResponse:
    """Featured, latest, continue listening and recommendations in one call."""
    return await get_home(ctx, user_id=user_id, limit=limit)
