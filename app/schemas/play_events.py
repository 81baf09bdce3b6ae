"""Append-only play event log."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from app.schemas.base import utcnow


class PlayEvent(SQLModel, table=True):  # type: ignore[call-arg]
    """One playback start reported by a client. Never updated or deleted."""

    __tablename__ = "play_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    episode_id: int = Field(foreign_key="episodes.id", index=True)
    podcast_id: int = Field(foreign_key="podcasts.id", index=True)
    user_id: Optional[int] = Field(default=None, index=True)  # None = anonymous
    listened_seconds: int = Field(default=0)
    device_info: Optional[str] = Field(default=None)
    geo_country: Optional[str] = Field(default=None, max_length=2)
    created_at: datetime = Field(default_factory=utcnow, index=True)
