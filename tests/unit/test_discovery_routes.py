"""HTTP tests for the discovery and home routes against in-memory stores."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.main import app
from app.models.fields import PodcastStatus
from app.routes.helpers import get_discovery_context
from app.stores.base import TextSearchUnavailableError
from tests.fakes import FakeWorld, make_episode, make_podcast


@pytest_asyncio.fixture
async def client(world: FakeWorld, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """Provide an HTTP client with the app wired to the in-memory world."""
    monkeypatch.setattr(settings, "recommendation_signals", ["follows", "popularity"])
    world.catalog.add_podcasts(
        make_podcast(1, title="Morning News", tags=["news"], category_ids=[1]),
        make_podcast(2, title="Crime Time", tags=["crime"], category_ids=[2]),
        make_podcast(3, title="Hidden Draft", status=PodcastStatus.draft),
    )
    world.catalog.add_episodes(
        make_episode(10, podcast_id=1, title="Headlines"),
        make_episode(20, podcast_id=2, title="Crime scene"),
    )
    world.events.add_plays(2, 3)
    world.events.add_plays(1, 1)

    app.dependency_overrides[get_discovery_context] = lambda: world.ctx
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_discovery_context, None)


@pytest.mark.asyncio
class TestDiscoveryRoutes:
    async def test_browse(self, client: AsyncClient):
        response = await client.get("/api/v1/discovery/browse")
        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data["items"]] == [2, 1]
        assert data["total"] == 2
        assert data["items"][0]["rss_url"].endswith("/podcasts/2/rss")

    async def test_browse_filters(self, client: AsyncClient):
        response = await client.get("/api/v1/discovery/browse", params={"categoryId": 1})
        assert [p["id"] for p in response.json()["items"]] == [1]

        response = await client.get("/api/v1/discovery/browse", params={"tags": "crime,news"})
        assert response.json()["total"] == 2

    async def test_out_of_range_limits_are_clamped(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/discovery/browse", params={"limit": 0, "offset": -10}
        )
        assert response.status_code == 200
        assert len(response.json()["items"]) == 1

    async def test_search(self, client: AsyncClient):
        response = await client.get("/api/v1/discovery/search", params={"q": "crime"})
        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data["podcasts"]] == [2]
        assert [e["id"] for e in data["episodes"]] == [20]
        assert data["episodes"][0]["podcast_title"] == "Crime Time"
        assert data["episodes"][0]["duration"] == "30:00"

    async def test_search_by_type(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/discovery/search", params={"q": "crime", "type": "episode"}
        )
        assert response.json()["podcasts"] == []

    async def test_unknown_search_type_searches_everything(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/discovery/search", params={"q": "crime", "type": "video"}
        )
        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data["podcasts"]] == [2]
        assert [e["id"] for e in data["episodes"]] == [20]

    async def test_search_requires_query(self, client: AsyncClient):
        response = await client.get("/api/v1/discovery/search", params={"q": "  "})
        assert response.status_code == 400

        response = await client.get("/api/v1/discovery/search")
        assert response.status_code == 400

    async def test_search_without_text_index_is_empty(self, client: AsyncClient, world):
        world.catalog.search_error = TextSearchUnavailableError("no index")

        response = await client.get("/api/v1/discovery/search", params={"q": "crime"})

        assert response.status_code == 200
        assert response.json() == {"podcasts": [], "episodes": []}

    async def test_trending(self, client: AsyncClient):
        response = await client.get("/api/v1/discovery/trending", params={"limit": 1})
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["items"]] == [2]

    async def test_new_releases(self, client: AsyncClient):
        response = await client.get("/api/v1/discovery/new-releases")
        data = response.json()
        assert [e["id"] for e in data["items"]] == [20, 10]
        assert data["total"] == 2

    async def test_featured_falls_back_to_trending(self, client: AsyncClient):
        response = await client.get("/api/v1/discovery/featured")
        assert [p["id"] for p in response.json()["items"]] == [2, 1]

    async def test_recommendations_require_identity(self, client: AsyncClient):
        response = await client.get("/api/v1/discovery/recommendations")
        assert response.status_code == 401

    async def test_recommendations(self, client: AsyncClient, world):
        world.events.add_progress(7, 20)

        response = await client.get(
            "/api/v1/discovery/recommendations", headers={"X-User-Id": "7"}
        )

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["items"]] == [1]


@pytest.mark.asyncio
class TestHomeRoute:
    async def test_home_for_listener(self, client: AsyncClient, world):
        world.events.add_progress(7, 10, position_seconds=120)

        response = await client.get("/api/v1/home", headers={"X-User-Id": "7"})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"featured", "latest", "continue_listening", "recommendations"}
        assert data["continue_listening"][0]["id"] == 10
        assert data["continue_listening"][0]["playback_position"] == 120
        assert [p["id"] for p in data["recommendations"]] == [2]

    async def test_home_anonymous(self, client: AsyncClient):
        response = await client.get("/api/v1/home", params={"limit": 1})

        data = response.json()
        assert data["continue_listening"] == []
        assert len(data["latest"]) == 1


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}
