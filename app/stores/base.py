"""Storage capability contracts consumed by the discovery engine.

The engine only reads through these interfaces. The Postgres implementations
live beside this module; tests substitute in-memory versions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from app.schemas.categories import Category
from app.schemas.episodes import Episode
from app.schemas.listening_progress import ListeningProgress
from app.schemas.podcasts import Podcast


class TextSearchUnavailableError(RuntimeError):
    """The store's text index or text-search configuration is missing.

    Raised instead of the driver error so callers can tell "search is not set
    up" apart from a genuine query failure.
    """


@dataclass(frozen=True)
class PodcastFilter:
    """Membership predicates for published-podcast listings.

    Every id in category_ids must be present on the podcast; tags match when
    at least one overlaps.
    """

    category_ids: tuple[int, ...] = ()
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlayCount:
    podcast_id: int
    plays: int


@dataclass(frozen=True)
class SubscriberOverlap:
    podcast_id: int
    subscribers: int


class CatalogStore(ABC):
    """Read access to podcasts, episodes, categories and the featured list."""

    @abstractmethod
    async def get_podcasts(
        self, podcast_ids: Sequence[int], published_only: bool = True
    ) -> list[Podcast]:
        """Fetch podcasts by id. Result order is unspecified; missing ids are skipped."""

    async def get_podcasts_in_order(self, podcast_ids: Sequence[int]) -> list[Podcast]:
        """Resolve ranked ids to published podcasts, keeping the ranking order.

        Ids that no longer resolve to a published podcast are dropped.
        """
        podcasts = await self.get_podcasts(podcast_ids, published_only=True)
        by_id = {podcast.id: podcast for podcast in podcasts}
        return [by_id[pid] for pid in dict.fromkeys(podcast_ids) if pid in by_id]

    @abstractmethod
    async def list_podcasts(
        self, filters: PodcastFilter, limit: int, offset: int
    ) -> list[Podcast]:
        """Published podcasts matching filters, most recently updated first."""

    @abstractmethod
    async def count_podcasts(self, filters: PodcastFilter) -> int:
        """Count published podcasts matching filters."""

    @abstractmethod
    async def newest_podcasts(self, limit: int) -> list[Podcast]:
        """Published podcasts, most recently created first."""

    @abstractmethod
    async def search_podcasts(
        self, query: str, tags: Sequence[str], limit: int, offset: int
    ) -> list[Podcast]:
        """Published podcasts whose text matches query.

        Raises:
            TextSearchUnavailableError: If the text index is not usable
        """

    @abstractmethod
    async def search_episodes(
        self, query: str, tags: Sequence[str], limit: int, offset: int
    ) -> list[Episode]:
        """Published episodes of published podcasts whose text matches query.

        When tags are given, only episodes of podcasts carrying one of them match.

        Raises:
            TextSearchUnavailableError: If the text index is not usable
        """

    @abstractmethod
    async def list_new_episodes(self, limit: int, offset: int) -> list[Episode]:
        """Published episodes of published podcasts, newest release first."""

    @abstractmethod
    async def count_new_episodes(self) -> int:
        """Count the episodes list_new_episodes pages over."""

    @abstractmethod
    async def get_episodes(
        self, episode_ids: Sequence[int], published_only: bool = True
    ) -> list[Episode]:
        """Fetch episodes by id; published_only also requires a published podcast."""

    @abstractmethod
    async def get_episode_podcast_ids(self, episode_ids: Sequence[int]) -> dict[int, int]:
        """Map episode id -> owning podcast id, regardless of status."""

    @abstractmethod
    async def find_related_podcast_ids(
        self,
        category_ids: Sequence[int],
        tags: Sequence[str],
        exclude_ids: Sequence[int],
        limit: int,
    ) -> list[int]:
        """Published podcasts sharing any category or tag, most recently updated first."""

    @abstractmethod
    async def list_featured_podcast_ids(self, limit: int) -> list[int]:
        """Curated podcast ids in ascending display order."""

    @abstractmethod
    async def get_categories(self, category_ids: Sequence[int]) -> list[Category]:
        """Fetch categories by id."""


class EventStore(ABC):
    """Read-only aggregation over play events and listening progress."""

    @abstractmethod
    async def count_plays_by_podcast(
        self, since: Optional[datetime] = None, limit: Optional[int] = None
    ) -> list[PlayCount]:
        """Play counts per podcast, highest first, ties broken by podcast id.

        Args:
            since: Only count events created at or after this time
            limit: Maximum number of podcasts to return
        """

    @abstractmethod
    async def list_recent_progress(
        self, user_id: int, limit: int
    ) -> list[ListeningProgress]:
        """The listener's progress rows, most recently updated first."""


class SocialGraphStore(ABC):
    """Read access to follow and subscription edges."""

    @abstractmethod
    async def list_following_ids(self, user_id: int) -> list[int]:
        """Ids of the users that user_id follows."""

    @abstractmethod
    async def count_subscriptions_by_podcast(
        self, user_ids: Sequence[int]
    ) -> list[SubscriberOverlap]:
        """How many of user_ids subscribe to each podcast, highest first.

        Ties are broken by podcast id.
        """
