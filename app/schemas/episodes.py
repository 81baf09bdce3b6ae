"""Episode catalog table."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DDL, Column, Integer, event, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlmodel import Field

from app.models.fields import EpisodeStatus
from app.schemas.base import SEARCH_TEXT_CONFIG, ArchivableMixin, utcnow


class Episode(ArchivableMixin, table=True):  # type: ignore[call-arg]
    """A single episode of a podcast.

    Scheduled episodes become visible once a publisher job flips them to
    published; discovery only reads the resulting status.
    """

    __tablename__ = "episodes"

    id: Optional[int] = Field(default=None, primary_key=True)
    podcast_id: int = Field(foreign_key="podcasts.id", index=True)
    title: str
    description: Optional[str] = Field(default=None)
    duration_seconds: int = Field(default=0)
    season_number: Optional[int] = Field(default=None)
    episode_number: Optional[int] = Field(default=None)
    show_notes: Optional[str] = Field(default=None)
    audio_url: str
    cover_url: Optional[str] = Field(default=None)
    category_ids: list[int] = Field(
        default_factory=list,
        sa_column=Column(
            ARRAY(Integer), nullable=False, server_default=text("'{}'::integer[]")
        ),
    )
    status: EpisodeStatus = Field(default=EpisodeStatus.draft, index=True)
    published_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utcnow)


EPISODE_SEARCH_VECTOR_DDL = (
    "ALTER TABLE episodes ADD COLUMN IF NOT EXISTS search_vector tsvector "
    "GENERATED ALWAYS AS ("
    f"setweight(to_tsvector('{SEARCH_TEXT_CONFIG}'::regconfig, coalesce(title, '')), 'A') || "
    f"setweight(to_tsvector('{SEARCH_TEXT_CONFIG}'::regconfig, coalesce(description, '')), 'B') || "
    f"setweight(to_tsvector('{SEARCH_TEXT_CONFIG}'::regconfig, coalesce(show_notes, '')), 'C')"
    ") STORED"
)
EPISODE_SEARCH_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS ix_episodes_search_vector "
    "ON episodes USING gin (search_vector)"
)

for _statement in (EPISODE_SEARCH_VECTOR_DDL, EPISODE_SEARCH_INDEX_DDL):
    event.listen(
        Episode.__table__,  # type: ignore[attr-defined]
        "after_create",
        DDL(_statement).execute_if(dialect="postgresql"),
    )
