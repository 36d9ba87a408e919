from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx
from dateutil import parser as date_parser

from ..config import Settings, endpoint, get_settings
from ..exceptions import UpstreamError
from ..http_client import get_http_client
from ..models.news import NewsArticle, NewsPage

logger = logging.getLogger(__name__)

PROVIDER = "newsdata"


@dataclass(slots=True)
class NewsService:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def fetch_page(self, query: str, cursor: str | None = None) -> NewsPage:
        """Fetch one page of the latest articles matching ``query``.

        ``cursor`` is the provider's ``nextPage`` token from a previous page;
        None asks for the first page. Articles keep the provider's order.
        """
        api_key = self.settings.news_api_key
        if not api_key:
            raise UpstreamError(PROVIDER, "NEWS_API_KEY is not configured")

        client = self.client or await get_http_client()
        params = {"apikey": api_key, "q": query}
        if cursor:
            params["page"] = cursor
        url = endpoint(self.settings.news_base_url, "latest")
        try:
            response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("news request for %r failed: %s", query, exc)
            raise UpstreamError(PROVIDER, f"request failed: {exc}") from exc

        if response.is_error:
            logger.warning(
                "news request for %r returned HTTP %s", query, response.status_code
            )
            raise UpstreamError(
                PROVIDER, "request rejected", status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(PROVIDER, "response is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise UpstreamError(PROVIDER, "response is not an object")

        articles = [
            _to_article(entry)
            for entry in payload.get("results") or []
            if isinstance(entry, dict)
        ]
        next_page = payload.get("nextPage")
        return NewsPage(
            articles=articles,
            next_cursor=str(next_page) if next_page else None,
            total_results=payload.get("totalResults") or 0,
        )


def _to_article(entry: dict[str, Any]) -> NewsArticle:
    return NewsArticle(
        id=str(entry.get("article_id") or entry.get("link") or ""),
        title=entry.get("title") or "",
        link=entry.get("link") or "",
        description=entry.get("description"),
        published_at=_parse_datetime(entry.get("pubDate")),
        image_url=entry.get("image_url"),
        source_id=entry.get("source_id"),
        source_name=entry.get("source_name"),
    )


def _parse_datetime(value: str | None) -> datetime | None:
    # The provider reports pubDate as a naive UTC timestamp.
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
