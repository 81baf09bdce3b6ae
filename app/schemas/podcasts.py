"""Podcast catalog table."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DDL, Column, Index, Integer, String, event, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlmodel import Field

from app.models.fields import EpisodeOrder, PodcastStatus
from app.schemas.base import SEARCH_TEXT_CONFIG, ArchivableMixin, utcnow


class Podcast(ArchivableMixin, table=True):  # type: ignore[call-arg]
    """A show owned by a creator.

    Only rows with status == published are ever surfaced by discovery.
    """

    __tablename__ = "podcasts"
    __table_args__ = (
        Index("ix_podcasts_category_ids", "category_ids", postgresql_using="gin"),
        Index("ix_podcasts_tags", "tags", postgresql_using="gin"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(index=True)
    title: str
    description: Optional[str] = Field(default=None)
    category_ids: list[int] = Field(
        default_factory=list,
        sa_column=Column(
            ARRAY(Integer), nullable=False, server_default=text("'{}'::integer[]")
        ),
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(
            ARRAY(String), nullable=False, server_default=text("'{}'::varchar[]")
        ),
    )
    cover_url: str
    language: str = Field(default="en")
    status: PodcastStatus = Field(default=PodcastStatus.draft, index=True)
    explicit: bool = Field(default=False)
    episode_order: EpisodeOrder = Field(default=EpisodeOrder.newest_first)
    website_url: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow, index=True)


# The full-text column is generated by Postgres and never written by the ORM,
# so it lives outside the mapped fields. Queries reference it by name.
PODCAST_SEARCH_VECTOR_DDL = (
    "ALTER TABLE podcasts ADD COLUMN IF NOT EXISTS search_vector tsvector "
    "GENERATED ALWAYS AS ("
    f"setweight(to_tsvector('{SEARCH_TEXT_CONFIG}'::regconfig, coalesce(title, '')), 'A') || "
    f"setweight(to_tsvector('{SEARCH_TEXT_CONFIG}'::regconfig, coalesce(description, '')), 'B')"
    ") STORED"
)
PODCAST_SEARCH_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS ix_podcasts_search_vector "
    "ON podcasts USING gin (search_vector)"
)

for _statement in (PODCAST_SEARCH_VECTOR_DDL, PODCAST_SEARCH_INDEX_DDL):
    event.listen(
        Podcast.__table__,  # type: ignore[attr-defined]
        "after_create",
        DDL(_statement).execute_if(dialect="postgresql"),
    )
