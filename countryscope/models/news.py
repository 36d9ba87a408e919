from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import CamelModel


class NewsArticle(CamelModel):
    id: str = Field(description="Provider article identifier")
    title: str = Field(description="Article headline")
    link: str = Field(description="Article URL")
    description: str | None = Field(default=None, description="Short teaser")
    published_at: datetime | None = Field(
        default=None, description="Publication timestamp in UTC if available"
    )
    image_url: str | None = None
    source_id: str | None = None
    source_name: str | None = None


class NewsPage(CamelModel):
    articles: list[NewsArticle] = Field(default_factory=list)
    next_cursor: str | None = Field(
        default=None, description="Opaque token for the following page"
    )
    total_results: int = Field(0, ge=0)
