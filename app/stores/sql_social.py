"""Postgres social-graph store: follows and subscriptions."""

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.schemas.follows import Follow
from app.schemas.subscriptions import Subscription
from app.stores.base import SocialGraphStore, SubscriberOverlap


class SqlSocialGraphStore(SocialGraphStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_following_ids(self, user_id: int) -> list[int]:
        stmt = (
            select(Follow.following_id)
            .where(Follow.follower_id == user_id)  # type: ignore[arg-type]
            .order_by(Follow.following_id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count_subscriptions_by_podcast(
        self, user_ids: Sequence[int]
    ) -> list[SubscriberOverlap]:
        if not user_ids:
            return []
        subscribers = func.count(func.distinct(Subscription.user_id)).label("subscribers")
        stmt = (
            select(Subscription.podcast_id, subscribers)  # type: ignore[call-overload]
            .where(Subscription.user_id.in_(list(user_ids)))  # type: ignore[attr-defined]
            .group_by(Subscription.podcast_id)
            .order_by(subscribers.desc(), Subscription.podcast_id.asc())  # type: ignore[attr-defined]
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [
                SubscriberOverlap(podcast_id=row[0], subscribers=row[1])
                for row in result.all()
            ]
