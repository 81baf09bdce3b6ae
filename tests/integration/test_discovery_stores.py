"""Integration tests for the Postgres stores and services built on them."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.fields import EpisodeStatus, PodcastStatus
from app.schemas.categories import Category
from app.schemas.episodes import Episode
from app.schemas.featured_podcasts import FeaturedPodcast
from app.schemas.follows import Follow
from app.schemas.listening_progress import ListeningProgress
from app.schemas.play_events import PlayEvent
from app.schemas.podcasts import Podcast
from app.schemas.subscriptions import Subscription
from app.services.catalog_service import browse, get_new_releases, search
from app.services.featured_service import get_featured
from app.services.recommendation_service import get_recommendations
from app.services.trending_service import get_trending
from app.stores.base import PodcastFilter

BASE = datetime(2026, 5, 1, 8, 0, 0)


def make_podcast(title: str, minutes: int = 0, **overrides) -> Podcast:
    values = dict(
        owner_id=1,
        title=title,
        cover_url="https://cdn.example.com/cover.jpg",
        status=PodcastStatus.published,
        created_at=BASE + timedelta(minutes=minutes),
        updated_at=BASE + timedelta(minutes=minutes),
    )
    values.update(overrides)
    return Podcast(**values)


def make_episode(podcast_id: int, title: str, hours: int = 0, **overrides) -> Episode:
    values = dict(
        podcast_id=podcast_id,
        title=title,
        audio_url="https://cdn.example.com/audio.mp3",
        status=EpisodeStatus.published,
        published_at=BASE + timedelta(hours=hours),
        created_at=BASE + timedelta(hours=hours),
    )
    values.update(overrides)
    return Episode(**values)


async def _add(session: AsyncSession, *rows):
    session.add_all(rows)
    await session.commit()
    for row in rows:
        await session.refresh(row)
    return rows


@pytest.mark.asyncio
class TestCatalogQueries:
    async def test_browse_filters_on_array_columns(self, db_session, sql_ctx):
        tech, science = await _add(
            db_session,
            Category(slug="tech", name="Tech"),
            Category(slug="science", name="Science"),
        )
        a, b, _ = await _add(
            db_session,
            make_podcast("Alpha", 1, category_ids=[tech.id], tags=["ai"]),
            make_podcast("Beta", 2, category_ids=[tech.id, science.id], tags=["space"]),
            make_podcast("Draft", 3, category_ids=[tech.id], status=PodcastStatus.draft),
        )

        page = await browse(sql_ctx, category_id=tech.id)
        assert [p.id for p in page.items] == [b.id, a.id]
        assert page.total == 2

        page = await browse(sql_ctx, category_id=tech.id, subcategory_id=science.id)
        assert [p.id for p in page.items] == [b.id]

        assert await sql_ctx.catalog.count_podcasts(PodcastFilter(tags=("ai", "nope"))) == 1

    async def test_full_text_search(self, db_session, sql_ctx):
        (show,) = await _add(
            db_session, make_podcast("Deep Space Radio", description="Rockets and launches")
        )
        await _add(
            db_session,
            make_episode(show.id, "Launch day", show_notes="Falcon rockets"),
            make_episode(show.id, "Rocket kitchen", status=EpisodeStatus.draft),
        )

        page = await search(sql_ctx, "rocket")

        assert [p.id for p in page.podcasts] == [show.id]
        assert [e.title for e in page.episodes] == ["Launch day"]

    async def test_search_without_text_index_fails_open(self, db_session, sql_ctx):
        await _add(db_session, make_podcast("Anything"))
        await db_session.execute(text("ALTER TABLE podcasts DROP COLUMN search_vector"))
        await db_session.execute(text("ALTER TABLE episodes DROP COLUMN search_vector"))
        await db_session.commit()

        page = await search(sql_ctx, "anything")

        assert page.podcasts == []
        assert page.episodes == []

    async def test_new_releases_hide_unpublished_podcasts(self, db_session, sql_ctx):
        live, hidden = await _add(
            db_session,
            make_podcast("Live"),
            make_podcast("Hidden", status=PodcastStatus.archived),
        )
        await _add(
            db_session,
            make_episode(live.id, "Old", 1),
            make_episode(live.id, "New", 5),
            make_episode(live.id, "Undated", 9, published_at=None),
            make_episode(hidden.id, "Invisible", 7),
        )

        page = await get_new_releases(sql_ctx)

        assert [e.title for e in page.items] == ["New", "Old", "Undated"]
        assert page.total == 3

    async def test_featured_order(self, db_session, sql_ctx):
        a, b = await _add(db_session, make_podcast("A"), make_podcast("B"))
        await _add(
            db_session,
            FeaturedPodcast(podcast_id=a.id, order=2),
            FeaturedPodcast(podcast_id=b.id, order=1),
        )

        page = await get_featured(sql_ctx)

        assert [p.id for p in page.items] == [b.id, a.id]


@pytest.mark.asyncio
class TestRankings:
    async def test_trending_ranks_by_play_count(self, db_session, sql_ctx):
        a, b, c = await _add(db_session, make_podcast("A"), make_podcast("B"), make_podcast("C"))
        ep_a, ep_b, ep_c = await _add(
            db_session,
            make_episode(a.id, "a1"),
            make_episode(b.id, "b1"),
            make_episode(c.id, "c1"),
        )
        plays = [(ep_b, b), (ep_b, b), (ep_c, c), (ep_c, c), (ep_a, a)]
        await _add(
            db_session,
            *(PlayEvent(episode_id=ep.id, podcast_id=p.id) for ep, p in plays),
        )

        page = await get_trending(sql_ctx, 10)

        # b and c tie on plays; the lower podcast id ranks first.
        assert [p.id for p in page.items] == [b.id, c.id, a.id]

    async def test_recommendations_prefer_followed_subscriptions(
        self, db_session, sql_ctx, monkeypatch
    ):
        monkeypatch.setattr(settings, "recommendation_signals", ["follows", "popularity"])
        listened, followed, popular = await _add(
            db_session, make_podcast("Listened"), make_podcast("Followed"), make_podcast("Popular")
        )
        ep_listened, ep_popular = await _add(
            db_session,
            make_episode(listened.id, "l1"),
            make_episode(popular.id, "p1"),
        )
        await _add(
            db_session,
            Follow(follower_id=1, following_id=2),
            Subscription(user_id=2, podcast_id=followed.id),
            Subscription(user_id=2, podcast_id=listened.id),
            ListeningProgress(user_id=1, episode_id=ep_listened.id, position_seconds=60),
            *(PlayEvent(episode_id=ep_popular.id, podcast_id=popular.id) for _ in range(3)),
            PlayEvent(episode_id=ep_listened.id, podcast_id=listened.id),
        )

        page = await get_recommendations(sql_ctx, 1, limit=10)

        assert [p.id for p in page.items] == [followed.id, popular.id]
