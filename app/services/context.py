"""Wiring of the stores and cache the discovery services read from."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.services.cache_service import CacheStore, IdListCache
from app.stores.base import CatalogStore, EventStore, SocialGraphStore
from app.stores.sql_catalog import SqlCatalogStore
from app.stores.sql_events import SqlEventStore
from app.stores.sql_social import SqlSocialGraphStore


@dataclass(frozen=True)
class DiscoveryContext:
    """Everything a discovery operation may read from.

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    catalog: CatalogStore
    events: EventStore
    social: SocialGraphStore
    cache: IdListCache


def build_sql_context(
    session_factory: async_sessionmaker[AsyncSession],
    cache_store: CacheStore,
) -> DiscoveryContext:
    """Build a context backed by Postgres stores sharing one session factory."""
    return DiscoveryContext(
        catalog=SqlCatalogStore(session_factory),
        events=SqlEventStore(session_factory),
        social=SqlSocialGraphStore(session_factory),
        cache=IdListCache(cache_store),
    )
