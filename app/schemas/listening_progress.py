"""Per-listener playback position table."""

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.schemas.base import utcnow


class ListeningProgress(SQLModel, table=True):  # type: ignore[call-arg]
    """Last known playback position for a (listener, episode) pair."""

    __tablename__ = "listening_progress"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "episode_id", name="uq_listening_progress_user_episode"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    episode_id: int = Field(foreign_key="episodes.id")
    position_seconds: int = Field(default=0)
    updated_at: datetime = Field(default_factory=utcnow, index=True)
