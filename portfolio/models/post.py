"""Blog post data models."""

import re
from datetime import date as date_type
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_post_date(value: str) -> datetime:
    """Parse a ``YYYY-MM-DD`` frontmatter date into a UTC midnight datetime.

    Raises ValueError for anything else, including impossible calendar dates.
    """
    if not _ISO_DATE_RE.match(value):
        raise ValueError(f"not a YYYY-MM-DD date: {value!r}")
    day = date_type.fromisoformat(value)
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


class Frontmatter(BaseModel):
    """Metadata block at the top of a post file."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    tags: tuple[str, ...] = ()
    excerpt: str | None = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_post_date(value)
        return value


class PostSummary(BaseModel):
    """Post metadata for index display."""

    model_config = ConfigDict(frozen=True)

    title: str
    date: str
    published_at: datetime
    description: str
    slug: str
    path: str
    tags: tuple[str, ...] = ()
    excerpt: str
    reading_time: int = Field(..., ge=1)

    @computed_field
    @property
    def formatted_date(self) -> str:
        return self.published_at.strftime("%B %d, %Y")

    @computed_field
    @property
    def iso_date(self) -> str:
        return self.published_at.isoformat()


class Post(PostSummary):
    """Full post with rendered HTML body."""

    content: str

    def summary(self) -> PostSummary:
        return PostSummary.model_validate(self.model_dump(exclude={"content"}))


class PostIndex(BaseModel):
    """Blog post index."""

    posts: list[PostSummary]
    total: int


class TagCount(BaseModel):
    tag: str
    count: int
