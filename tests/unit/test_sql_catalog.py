"""Unit tests for Postgres catalog error translation (no database needed)."""

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError, ProgrammingError

from app.schemas.base import SEARCH_TEXT_CONFIG
from app.schemas.episodes import EPISODE_SEARCH_VECTOR_DDL
from app.schemas.podcasts import PODCAST_SEARCH_VECTOR_DDL
from app.stores.base import TextSearchUnavailableError
from app.stores.sql_catalog import SqlCatalogStore, is_text_search_unavailable


def _error(cls, message: str):
    return cls("SELECT 1", {}, Exception(message))


class _RaisingSession:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def __aenter__(self) -> "_RaisingSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    async def execute(self, stmt):
        self.statement = stmt
        raise self.exc


class TestIsTextSearchUnavailable:
    def test_missing_search_vector_column(self) -> None:
        exc = _error(ProgrammingError, 'column podcasts.search_vector does not exist')
        assert is_text_search_unavailable(exc)

    def test_unknown_text_search_configuration(self) -> None:
        exc = _error(ProgrammingError, 'text search configuration "klingon" does not exist')
        assert is_text_search_unavailable(exc)

    def test_unrelated_errors(self) -> None:
        assert not is_text_search_unavailable(_error(ProgrammingError, 'column "foo" does not exist'))
        assert not is_text_search_unavailable(_error(OperationalError, "connection refused"))


@pytest.mark.asyncio
class TestSearchErrorTranslation:
    async def test_missing_index_becomes_text_search_unavailable(self) -> None:
        exc = _error(ProgrammingError, "column episodes.search_vector does not exist")
        store = SqlCatalogStore(lambda: _RaisingSession(exc))  # type: ignore[arg-type]

        with pytest.raises(TextSearchUnavailableError):
            await store.search_episodes("crime", (), limit=10, offset=0)

    async def test_other_driver_errors_are_reraised(self) -> None:
        exc = _error(OperationalError, "connection refused")
        store = SqlCatalogStore(lambda: _RaisingSession(exc))  # type: ignore[arg-type]

        with pytest.raises(OperationalError):
            await store.search_podcasts("crime", (), limit=10, offset=0)

    async def test_empty_id_lookups_skip_the_database(self) -> None:
        store = SqlCatalogStore(lambda: _RaisingSession(RuntimeError("unreachable")))  # type: ignore[arg-type]

        assert await store.get_podcasts([]) == []
        assert await store.get_episodes([]) == []
        assert await store.get_episode_podcast_ids([]) == {}
        assert await store.get_categories([]) == []


class TestTextSearchConfiguration:
    def test_generated_columns_use_the_shared_configuration(self) -> None:
        for ddl in (PODCAST_SEARCH_VECTOR_DDL, EPISODE_SEARCH_VECTOR_DDL):
            assert f"'{SEARCH_TEXT_CONFIG}'::regconfig" in ddl
            assert ddl.count("::regconfig") == ddl.count(f"'{SEARCH_TEXT_CONFIG}'::regconfig")

    @pytest.mark.asyncio
    async def test_queries_parse_with_the_same_configuration(self) -> None:
        session = _RaisingSession(RuntimeError("stop after capture"))
        store = SqlCatalogStore(lambda: session)  # type: ignore[arg-type]

        with pytest.raises(RuntimeError):
            await store.search_podcasts("crime", (), limit=10, offset=0)

        compiled = session.statement.compile(dialect=postgresql.dialect())
        assert "plainto_tsquery" in str(compiled)
        assert SEARCH_TEXT_CONFIG in compiled.params.values()
