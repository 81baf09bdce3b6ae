"""Personalized podcast recommendations.

Candidates come from a fixed-priority pipeline of producers, each returning
podcast ids in its own ranking order:

1. follows     - podcasts the people you follow subscribe to, by overlap
2. popularity  - most played podcasts over the recent popularity window
3. affinity    - podcasts sharing a category or tag with what you listened to
                 (available, not enabled by default)

Podcasts the listener already has progress on are excluded from every
producer. Producer outputs are merged in priority order without duplicates;
when nothing comes out the listener gets the trending list instead.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional, Sequence

from app.config import settings
from app.models.pages import PodcastPage
from app.schemas.base import utcnow
from app.services.context import DiscoveryContext
from app.services.trending_service import get_trending
from app.utils.pagination import MAX_RECOMMENDATION_LIMIT, clamp_limit, clamp_offset

logger = logging.getLogger(__name__)

# Popularity candidates fetched before exclusion: max(limit * 2, this)
POPULARITY_MIN_CANDIDATES = 50


@dataclass(frozen=True)
class RecommendationRequest:
    """Inputs shared by every candidate producer for one request."""

    user_id: int
    limit: int
    offset: int
    excluded: frozenset[int]

    @property
    def target_size(self) -> int:
        return self.limit + self.offset

    def without_excluded(self, podcast_ids: Iterable[int]) -> list[int]:
        return [pid for pid in podcast_ids if pid not in self.excluded]


class CandidateProducer(ABC):
    """One ranked source of recommendation candidates."""

    name: str = ""

    @abstractmethod
    async def produce(
        self, ctx: DiscoveryContext, request: RecommendationRequest
    ) -> list[int]:
        """Return candidate podcast ids, best first, already excluded."""


class FollowedSubscriptionsProducer(CandidateProducer):
    """People I follow also subscribe to this."""

    name = "follows"

    async def produce(
        self, ctx: DiscoveryContext, request: RecommendationRequest
    ) -> list[int]:
        following = await ctx.social.list_following_ids(request.user_id)
        if not following:
            return []
        overlaps = await ctx.social.count_subscriptions_by_podcast(following)
        return request.without_excluded(o.podcast_id for o in overlaps)


class RecentPopularityProducer(CandidateProducer):
    """Most played podcasts inside a sliding time window."""

    name = "popularity"

    async def produce(
        self, ctx: DiscoveryContext, request: RecommendationRequest
    ) -> list[int]:
        since = utcnow() - timedelta(days=settings.popularity_window_days)
        cap = max(request.limit * 2, POPULARITY_MIN_CANDIDATES)
        counts = await ctx.events.count_plays_by_podcast(since=since, limit=cap)
        return request.without_excluded(c.podcast_id for c in counts)


class TasteAffinityProducer(CandidateProducer):
    """Podcasts in the same categories or with the same tags as listened ones."""

    name = "affinity"

    async def produce(
        self, ctx: DiscoveryContext, request: RecommendationRequest
    ) -> list[int]:
        if not request.excluded:
            return []
        listened = await ctx.catalog.get_podcasts(
            sorted(request.excluded), published_only=False
        )
        category_ids = sorted({cid for p in listened for cid in p.category_ids})
        tags = sorted({tag for p in listened for tag in p.tags if tag})
        if not category_ids and not tags:
            return []
        return await ctx.catalog.find_related_podcast_ids(
            category_ids,
            tags,
            exclude_ids=sorted(request.excluded),
            limit=max(request.limit * 2, POPULARITY_MIN_CANDIDATES),
        )


PRODUCERS: dict[str, type[CandidateProducer]] = {
    FollowedSubscriptionsProducer.name: FollowedSubscriptionsProducer,
    RecentPopularityProducer.name: RecentPopularityProducer,
    TasteAffinityProducer.name: TasteAffinityProducer,
}


def producers_from_names(names: Sequence[str]) -> list[CandidateProducer]:
    """Instantiate producers in the given priority order.

    Raises:
        ValueError: If a name does not match a known producer
    """
    producers: list[CandidateProducer] = []
    for name in names:
        producer_cls = PRODUCERS.get(name.strip().lower())
        if producer_cls is None:
            raise ValueError(f"Unknown recommendation signal: {name!r}")
        producers.append(producer_cls())
    return producers


def compose_candidates(ranked_lists: Sequence[Sequence[int]], target_size: int) -> list[int]:
    """Merge ranked id lists in priority order, de-duplicated.

    Merging stops as soon as target_size ids are collected; later lists are
    only consulted to fill what earlier ones could not.
    """
    merged: dict[int, None] = {}
    for ranked in ranked_lists:
        for podcast_id in ranked:
            if len(merged) >= target_size:
                return list(merged)
            merged.setdefault(podcast_id, None)
    return list(merged)


async def build_exclusion_set(ctx: DiscoveryContext, user_id: int) -> frozenset[int]:
    """Podcast ids owning the episodes the listener has recent progress on."""
    progress = await ctx.events.list_recent_progress(
        user_id, settings.recommendation_history_limit
    )
    if not progress:
        return frozenset()
    owners = await ctx.catalog.get_episode_podcast_ids([p.episode_id for p in progress])
    return frozenset(owners.values())


async def get_recommendations(
    ctx: DiscoveryContext,
    user_id: Optional[int],
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    producers: Optional[Sequence[CandidateProducer]] = None,
) -> PodcastPage:
    """Return a personalized page of podcasts for a listener.

    Args:
        ctx: Discovery stores and cache
        user_id: Listener id, or None for anonymous callers (served trending)
        limit: Page size (clamped to MAX_RECOMMENDATION_LIMIT)
        offset: Number of candidates to skip
        producers: Candidate pipeline; defaults to settings.recommendation_signals

    Returns:
        PodcastPage whose total is the number of merged candidates before
        slicing. Resolution can still drop candidates that were unpublished
        after ranking, so total is an estimate of what is available.
    """
    limit = clamp_limit(limit, maximum=MAX_RECOMMENDATION_LIMIT)
    offset = clamp_offset(offset)

    if user_id is None:
        return await get_trending(ctx, limit)

    if producers is None:
        producers = producers_from_names(settings.recommendation_signals)

    excluded = await build_exclusion_set(ctx, user_id)
    request = RecommendationRequest(
        user_id=user_id, limit=limit, offset=offset, excluded=excluded
    )

    ranked_lists = await asyncio.gather(
        *(producer.produce(ctx, request) for producer in producers)
    )
    candidates = compose_candidates(ranked_lists, request.target_size)

    if not candidates:
        logger.info(f"No recommendation candidates for user {user_id}; serving trending")
        return await get_trending(ctx, limit)

    window = candidates[offset : offset + limit]
    items = await ctx.catalog.get_podcasts_in_order(window)
    return PodcastPage(items=items, total=len(candidates))
