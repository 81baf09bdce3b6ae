"""Postgres catalog store: podcasts, episodes, categories, featured list."""

from typing import Any, Sequence

from sqlalchemy import cast, func, literal_column, or_, select
from sqlalchemy.dialects.postgresql import REGCONFIG
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.fields import EpisodeStatus, PodcastStatus
from app.schemas.base import SEARCH_TEXT_CONFIG
from app.schemas.categories import Category
from app.schemas.episodes import Episode
from app.schemas.featured_podcasts import FeaturedPodcast
from app.schemas.podcasts import Podcast
from app.stores.base import CatalogStore, PodcastFilter, TextSearchUnavailableError


# Generated tsvector columns, created by migration / table DDL hooks
_PODCAST_SEARCH_VECTOR = literal_column("podcasts.search_vector")
_EPISODE_SEARCH_VECTOR = literal_column("episodes.search_vector")


def is_text_search_unavailable(exc: DBAPIError) -> bool:
    """Return True when a driver error means full-text search is not set up.

    Covers a missing generated search_vector column and an unknown text
    search configuration. Anything else is a genuine query failure.
    """
    message = str(exc.orig if exc.orig is not None else exc).lower()
    if "text search configuration" in message:
        return True
    return "search_vector" in message and "does not exist" in message


def _apply_podcast_filter(stmt: Any, filters: PodcastFilter) -> Any:
    if filters.category_ids:
        stmt = stmt.where(
            Podcast.category_ids.contains(list(filters.category_ids))  # type: ignore[attr-defined]
        )
    if filters.tags:
        stmt = stmt.where(Podcast.tags.overlap(list(filters.tags)))  # type: ignore[attr-defined]
    return stmt


def _published_episodes() -> Any:
    """Select published episodes whose podcast is published too."""
    return (
        select(Episode)
        .join(Podcast, Podcast.id == Episode.podcast_id)  # type: ignore[arg-type]
        .where(Episode.status == EpisodeStatus.published)  # type: ignore[arg-type]
        .where(Podcast.status == PodcastStatus.published)  # type: ignore[arg-type]
    )


class SqlCatalogStore(CatalogStore):
    """CatalogStore backed by Postgres.

    Every call opens its own session so independent queries from one request
    can run concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _scalars(self, stmt: Any) -> list[Any]:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _scalar_count(self, stmt: Any) -> int:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def _search(self, stmt: Any) -> list[Any]:
        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
            except DBAPIError as exc:
                if is_text_search_unavailable(exc):
                    raise TextSearchUnavailableError(str(exc.orig)) from exc
                raise
            return list(result.scalars().all())

    def _ts_query(self, query: str) -> Any:
        return func.plainto_tsquery(cast(SEARCH_TEXT_CONFIG, REGCONFIG), query)

    async def get_podcasts(
        self, podcast_ids: Sequence[int], published_only: bool = True
    ) -> list[Podcast]:
        if not podcast_ids:
            return []
        stmt = select(Podcast).where(Podcast.id.in_(list(podcast_ids)))  # type: ignore[union-attr]
        if published_only:
            stmt = stmt.where(Podcast.status == PodcastStatus.published)  # type: ignore[arg-type]
        return await self._scalars(stmt)

    async def list_podcasts(
        self, filters: PodcastFilter, limit: int, offset: int
    ) -> list[Podcast]:
        stmt = select(Podcast).where(
            Podcast.status == PodcastStatus.published  # type: ignore[arg-type]
        )
        stmt = (
            _apply_podcast_filter(stmt, filters)
            .order_by(Podcast.updated_at.desc(), Podcast.id.desc())  # type: ignore[attr-defined,union-attr]
            .limit(limit)
            .offset(offset)
        )
        return await self._scalars(stmt)

    async def count_podcasts(self, filters: PodcastFilter) -> int:
        stmt = (
            select(func.count())
            .select_from(Podcast)
            .where(Podcast.status == PodcastStatus.published)  # type: ignore[arg-type]
        )
        return await self._scalar_count(_apply_podcast_filter(stmt, filters))

    async def newest_podcasts(self, limit: int) -> list[Podcast]:
        stmt = (
            select(Podcast)
            .where(Podcast.status == PodcastStatus.published)  # type: ignore[arg-type]
            .order_by(Podcast.created_at.desc(), Podcast.id.desc())  # type: ignore[attr-defined,union-attr]
            .limit(limit)
        )
        return await self._scalars(stmt)

    async def search_podcasts(
        self, query: str, tags: Sequence[str], limit: int, offset: int
    ) -> list[Podcast]:
        stmt = (
            select(Podcast)
            .where(Podcast.status == PodcastStatus.published)  # type: ignore[arg-type]
            .where(_PODCAST_SEARCH_VECTOR.op("@@")(self._ts_query(query)))
        )
        if tags:
            stmt = stmt.where(Podcast.tags.overlap(list(tags)))  # type: ignore[attr-defined]
        stmt = (
            stmt.order_by(Podcast.updated_at.desc(), Podcast.id.desc())  # type: ignore[attr-defined,union-attr]
            .limit(limit)
            .offset(offset)
        )
        return await self._search(stmt)

    async def search_episodes(
        self, query: str, tags: Sequence[str], limit: int, offset: int
    ) -> list[Episode]:
        stmt = _published_episodes().where(
            _EPISODE_SEARCH_VECTOR.op("@@")(self._ts_query(query))
        )
        if tags:
            stmt = stmt.where(Podcast.tags.overlap(list(tags)))  # type: ignore[attr-defined]
        stmt = (
            stmt.order_by(
                Episode.published_at.desc().nulls_last(),  # type: ignore[union-attr]
                Episode.id.desc(),  # type: ignore[union-attr]
            )
            .limit(limit)
            .offset(offset)
        )
        return await self._search(stmt)

    async def list_new_episodes(self, limit: int, offset: int) -> list[Episode]:
        stmt = (
            _published_episodes()
            .order_by(
                Episode.published_at.desc().nulls_last(),  # type: ignore[union-attr]
                Episode.created_at.desc(),  # type: ignore[attr-defined]
                Episode.id.desc(),  # type: ignore[union-attr]
            )
            .limit(limit)
            .offset(offset)
        )
        return await self._scalars(stmt)

    async def count_new_episodes(self) -> int:
        stmt = (
            select(func.count())
            .select_from(Episode)
            .join(Podcast, Podcast.id == Episode.podcast_id)  # type: ignore[arg-type]
            .where(Episode.status == EpisodeStatus.published)  # type: ignore[arg-type]
            .where(Podcast.status == PodcastStatus.published)  # type: ignore[arg-type]
        )
        return await self._scalar_count(stmt)

    async def get_episodes(
        self, episode_ids: Sequence[int], published_only: bool = True
    ) -> list[Episode]:
        if not episode_ids:
            return []
        stmt = _published_episodes() if published_only else select(Episode)
        stmt = stmt.where(Episode.id.in_(list(episode_ids)))  # type: ignore[union-attr]
        return await self._scalars(stmt)

    async def get_episode_podcast_ids(self, episode_ids: Sequence[int]) -> dict[int, int]:
        if not episode_ids:
            return {}
        stmt = select(Episode.id, Episode.podcast_id).where(  # type: ignore[call-overload]
            Episode.id.in_(list(episode_ids))  # type: ignore[union-attr]
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return {row[0]: row[1] for row in result.all()}

    async def find_related_podcast_ids(
        self,
        category_ids: Sequence[int],
        tags: Sequence[str],
        exclude_ids: Sequence[int],
        limit: int,
    ) -> list[int]:
        conditions = []
        if category_ids:
            conditions.append(Podcast.category_ids.overlap(list(category_ids)))  # type: ignore[attr-defined]
        if tags:
            conditions.append(Podcast.tags.overlap(list(tags)))  # type: ignore[attr-defined]
        if not conditions:
            return []

        stmt = (
            select(Podcast.id)
            .where(Podcast.status == PodcastStatus.published)  # type: ignore[arg-type]
            .where(or_(*conditions))
        )
        if exclude_ids:
            stmt = stmt.where(Podcast.id.notin_(list(exclude_ids)))  # type: ignore[union-attr]
        stmt = stmt.order_by(
            Podcast.updated_at.desc(), Podcast.id.desc()  # type: ignore[attr-defined,union-attr]
        ).limit(limit)
        return await self._scalars(stmt)

    async def list_featured_podcast_ids(self, limit: int) -> list[int]:
        stmt = (
            select(FeaturedPodcast.podcast_id)
            .order_by(FeaturedPodcast.order.asc(), FeaturedPodcast.id.asc())  # type: ignore[attr-defined,union-attr]
            .limit(limit)
        )
        return await self._scalars(stmt)

    async def get_categories(self, category_ids: Sequence[int]) -> list[Category]:
        if not category_ids:
            return []
        stmt = select(Category).where(Category.id.in_(list(category_ids)))  # type: ignore[union-attr]
        return await self._scalars(stmt)
