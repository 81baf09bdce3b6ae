"""Unit tests for the composed home screen."""

import pytest

from app.config import settings
from app.models.fields import EpisodeStatus
from app.services.home_service import get_home
from tests.fakes import make_episode, make_podcast


@pytest.fixture(autouse=True)
def default_signals(monkeypatch):
    monkeypatch.setattr(settings, "recommendation_signals", ["follows", "popularity"])


def _seed(world) -> None:
    world.catalog.add_podcasts(*(make_podcast(i) for i in range(1, 10)))
    world.catalog.add_episodes(
        *(make_episode(100 + i, podcast_id=i) for i in range(1, 10)),
        make_episode(200, podcast_id=1, status=EpisodeStatus.draft),
    )
    world.catalog.feature(9, order=1)
    world.catalog.feature(8, order=2)
    world.events.add_plays(5, 4)
    world.events.add_plays(6, 2)


@pytest.mark.asyncio
class TestGetHome:
    async def test_anonymous_home(self, world) -> None:
        _seed(world)

        home = await get_home(world.ctx, user_id=None, limit=3)

        assert [p.id for p in home.featured] == [9, 8]
        assert [e.id for e in home.latest] == [109, 108, 107]
        assert home.continue_listening == []
        assert [p.id for p in home.recommendations] == [5, 6]

    async def test_continue_listening_keeps_recency_and_position(self, world) -> None:
        _seed(world)
        world.events.add_progress(1, 103, position_seconds=50, minutes_ago=10)
        world.events.add_progress(1, 101, position_seconds=900, minutes_ago=1)
        world.events.add_progress(1, 200, position_seconds=10, minutes_ago=0)

        home = await get_home(world.ctx, user_id=1)

        assert [(i.id, i.playback_position) for i in home.continue_listening] == [
            (101, 900),
            (103, 50),
        ]
        assert home.continue_listening[0].podcast_title == "Podcast 1"

    async def test_recommendations_are_personalized(self, world) -> None:
        _seed(world)
        world.events.add_progress(1, 105)

        home = await get_home(world.ctx, user_id=1)

        assert [p.id for p in home.recommendations] == [6]

    async def test_default_limit_is_six(self, world) -> None:
        _seed(world)

        home = await get_home(world.ctx)

        assert len(home.latest) == 6

    async def test_failing_section_renders_empty(self, world) -> None:
        _seed(world)
        world.events.error = RuntimeError("events offline")

        home = await get_home(world.ctx, user_id=None, limit=3)

        # Featured is curated so it does not need play counts.
        assert [p.id for p in home.featured] == [9, 8]
        assert [e.id for e in home.latest] == [109, 108, 107]
        assert home.recommendations == []
