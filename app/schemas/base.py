"""Base Classes to Use as MixIns Elsewhere in App"""

from datetime import UTC, datetime
from typing import Optional

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the timestamp columns in this schema."""
    return datetime.now(UTC).replace(tzinfo=None)


class ArchivableMixin(SQLModel):
    archived_at: Optional[datetime] = Field(default=None, index=True)


# Text search configuration of the generated search_vector columns. Queries
# must parse with the same configuration or stems will not match; the initial
# migration hard-codes this value too.
SEARCH_TEXT_CONFIG = "english"
