"""Shared pytest setup.

Unit tests run against in-memory stores; only tests/integration talks to
Postgres. The app settings still require a DATABASE_URL at import time, so a
placeholder is provided when none is configured (no connection is opened).
"""

import os

import pytest
from dotenv import load_dotenv

load_dotenv()

os.environ.setdefault(
    "DATABASE_URL", "postgresql+asyncpg://localhost:5432/podcast_discovery_test"
)
os.environ.setdefault("REDIS_URL", "")

from tests.fakes import FakeWorld, build_world  # noqa: E402


@pytest.fixture()
def world() -> FakeWorld:
    """Fresh in-memory stores with a working dict-backed cache."""
    return build_world()


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Ensure HTTPX uses asyncio backend during tests."""
    return "asyncio"
