"""Pagination limits shared by every discovery endpoint."""

from typing import Optional

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

# Trending and recommendations are cheaper to rank in smaller pages.
DEFAULT_TRENDING_LIMIT = 10
MAX_TRENDING_LIMIT = 50
MAX_RECOMMENDATION_LIMIT = 50

FEATURED_LIMIT = 20


def clamp_limit(
    limit: Optional[int],
    maximum: int = MAX_PAGE_LIMIT,
    default: int = DEFAULT_PAGE_LIMIT,
) -> int:
    """Return a page size within [1, maximum].

    Args:
        limit: Requested page size, or None for the default
        maximum: Hard upper bound for this endpoint
        default: Page size used when nothing was requested

    Returns:
        The effective page size
    """
    if limit is None:
        limit = default
    return max(1, min(int(limit), maximum))


def clamp_offset(offset: Optional[int]) -> int:
    """Return a non-negative offset."""
    if offset is None:
        return 0
    return max(0, int(offset))
