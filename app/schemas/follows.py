"""Directed follower -> followed-user edges."""

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.schemas.base import utcnow


class Follow(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    follower_id: int = Field(index=True)
    following_id: int = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow)
