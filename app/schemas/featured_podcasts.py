"""Admin-curated featured podcast ordering."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from app.schemas.base import utcnow


class FeaturedPodcast(SQLModel, table=True):  # type: ignore[call-arg]
    """A podcast pinned to the featured shelf at a given position.

    Lower order values are shown first.
    """

    __tablename__ = "featured_podcasts"

    id: Optional[int] = Field(default=None, primary_key=True)
    podcast_id: int = Field(foreign_key="podcasts.id", unique=True)
    order: int = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow)
