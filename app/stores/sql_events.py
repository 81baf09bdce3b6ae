"""Postgres event log reader: play events and listening progress."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.schemas.listening_progress import ListeningProgress
from app.schemas.play_events import PlayEvent
from app.stores.base import EventStore, PlayCount


class SqlEventStore(EventStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def count_plays_by_podcast(
        self, since: Optional[datetime] = None, limit: Optional[int] = None
    ) -> list[PlayCount]:
        plays = func.count(PlayEvent.id).label("plays")  # type: ignore[arg-type]
        stmt = select(PlayEvent.podcast_id, plays).group_by(PlayEvent.podcast_id)  # type: ignore[call-overload]
        if since is not None:
            stmt = stmt.where(PlayEvent.created_at >= since)  # type: ignore[arg-type]
        stmt = stmt.order_by(plays.desc(), PlayEvent.podcast_id.asc())  # type: ignore[attr-defined]
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [PlayCount(podcast_id=row[0], plays=row[1]) for row in result.all()]

    async def list_recent_progress(
        self, user_id: int, limit: int
    ) -> list[ListeningProgress]:
        stmt = (
            select(ListeningProgress)
            .where(ListeningProgress.user_id == user_id)  # type: ignore[arg-type]
            .order_by(
                ListeningProgress.updated_at.desc(),  # type: ignore[attr-defined]
                ListeningProgress.id.desc(),  # type: ignore[union-attr]
            )
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())
