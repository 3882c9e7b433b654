"""WordPress REST payload schemas and the ingestion envelope."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


def _rendered(value: Any) -> Any:
    """Flatten WordPress ``{"rendered": "..."}`` fields to plain strings."""
    if isinstance(value, dict):
        return value.get("rendered") or ""
    if value is None:
        return ""
    return value


class Post(BaseModel):
    """A blog post as returned by ``/wp-json/wp/v2/posts``.

    Title, content and excerpt keep their raw HTML.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str = ""
    content: str = ""
    excerpt: str = ""
    categories: tuple[int, ...] = ()
    date: datetime
    modified: datetime | None = None
    link: str | None = None

    @field_validator("title", "content", "excerpt", mode="before")
    @classmethod
    def _flatten_rendered(cls, value: Any) -> Any:
        return _rendered(value)

    @field_validator("categories", mode="before")
    @classmethod
    def _coerce_categories(cls, value: Any) -> Any:
        if value is None:
            return ()
        return value


class Category(BaseModel):
    """A post category from ``/wp-json/wp/v2/categories``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    slug: str = ""


class TreatmentMatch(BaseModel):
    """Posts that cover a configured treatment."""

    treatment: str
    posts: list[Post] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def frequency(self) -> int:
        return len(self.posts)


class BlogData(BaseModel):
    """Everything one ingestion run produces."""

    posts: list[Post] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    treatment_matches: list[TreatmentMatch] = Field(default_factory=list)
