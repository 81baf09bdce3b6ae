"""Category taxonomy table."""

from typing import Optional

from sqlmodel import Field, SQLModel


class Category(SQLModel, table=True):  # type: ignore[call-arg]
    """A browse category. Subcategories point at their parent via parent_id."""

    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(unique=True, index=True)
    name: str
    parent_id: Optional[int] = Field(
        default=None, foreign_key="categories.id", index=True
    )
