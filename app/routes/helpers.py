"""Shared dependencies for the discovery routes."""

from typing import Optional

from fastapi import Header, HTTPException, Request

from app.models.fields import SearchType
from app.services.context import DiscoveryContext

USER_ID_HEADER = "X-User-Id"


def get_discovery_context(request: Request) -> DiscoveryContext:
    """Return the DiscoveryContext built at application startup."""
    return request.app.state.discovery_context


def get_current_user_id(
    user_id: Optional[int] = Header(default=None, alias=USER_ID_HEADER),
) -> Optional[int]:
    """Listener id forwarded by the upstream auth layer, if any."""
    return user_id


def require_user_id(
    user_id: Optional[int] = Header(default=None, alias=USER_ID_HEADER),
) -> int:
    """Listener id; anonymous callers are rejected with 401."""
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id


def parse_tags(raw: Optional[list[str]]) -> list[str]:
    """Accept both repeated ?tags=a&tags=b and comma-separated ?tags=a,b."""
    if not raw:
        return []
    tags: list[str] = []
    for value in raw:
        tags.extend(part.strip() for part in value.split(",") if part.strip())
    return tags


def parse_search_type(raw: Optional[str]) -> SearchType:
    """Map ?type= onto a SearchType; missing or unknown values search everything."""
    if not raw:
        return SearchType.all
    try:
        return SearchType(raw)
    except ValueError:
        return SearchType.all
