"""Listener -> podcast subscription edges."""

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.schemas.base import utcnow


class Subscription(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("user_id", "podcast_id", name="uq_subscriptions_user_podcast"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    podcast_id: int = Field(foreign_key="podcasts.id", index=True)
    created_at: datetime = Field(default_factory=utcnow)
