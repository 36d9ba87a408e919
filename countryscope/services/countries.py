from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from ..config import Settings, endpoint, get_settings
from ..exceptions import CountryNotFoundError, UpstreamError
from ..http_client import get_http_client
from ..models.country import CountryName, CountryProfile, CountrySummary, Currency

logger = logging.getLogger(__name__)

PROVIDER = "restcountries"
PROFILE_FIELDS = "name,capital,continents,currencies,languages,flag,population"
# The provider answers 400 for malformed codes and 404 for unknown ones.
NOT_FOUND_STATUSES = frozenset({400, 404})


@dataclass(slots=True)
class CountryService:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def search_by_name(self, query: str) -> list[CountrySummary]:
        """Free-text country search, ranked and capped to the configured limit.

        Queries shorter than the minimum length never reach the provider. Names
        starting with the query rank ahead of names merely containing it; ties
        are broken case-insensitively by display name.
        """
        normalized = (query or "").strip().lower()
        if len(normalized) < self.settings.search_min_query_length:
            return []

        client = self.client or await get_http_client()
        url = endpoint(
            self.settings.rest_countries_base_url, f"name/{quote(normalized, safe='')}"
        )
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("country search for %r failed: %s", normalized, exc)
            raise UpstreamError(PROVIDER, f"search request failed: {exc}") from exc

        if response.status_code == 404:
            return []
        if response.is_error:
            logger.warning(
                "country search for %r returned HTTP %s", normalized, response.status_code
            )
            raise UpstreamError(
                PROVIDER, "search request rejected", status_code=response.status_code
            )

        payload = _decode(response)
        if not isinstance(payload, list):
            raise UpstreamError(PROVIDER, "search payload is not a list")

        summaries = [
            _to_summary(record) for record in payload if isinstance(record, dict)
        ]
        summaries.sort(key=lambda summary: _rank(summary, normalized))
        return summaries[: self.settings.search_result_limit]

    async def get_by_code(self, code: str) -> CountryProfile:
        normalized = code.strip().upper()
        client = self.client or await get_http_client()
        url = endpoint(
            self.settings.rest_countries_base_url, f"alpha/{quote(normalized, safe='')}"
        )
        try:
            response = await client.get(url, params={"fields": PROFILE_FIELDS})
        except httpx.HTTPError as exc:
            logger.warning("country lookup for %s failed: %s", normalized, exc)
            raise UpstreamError(PROVIDER, f"lookup request failed: {exc}") from exc

        if response.status_code in NOT_FOUND_STATUSES:
            raise CountryNotFoundError(code)
        if response.is_error:
            logger.warning(
                "country lookup for %s returned HTTP %s", normalized, response.status_code
            )
            raise UpstreamError(
                PROVIDER, "lookup request rejected", status_code=response.status_code
            )

        payload = _decode(response)
        record = payload[0] if isinstance(payload, list) and payload else payload
        if not isinstance(record, dict) or not record:
            raise CountryNotFoundError(code)
        return _to_profile(record)


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamError(PROVIDER, "response is not valid JSON") from exc


def _rank(summary: CountrySummary, query: str) -> tuple[bool, str]:
    name = summary.display_name.lower()
    return (not name.startswith(query), summary.display_name.casefold())


def _to_summary(record: dict[str, Any]) -> CountrySummary:
    name = record.get("name") or {}
    capitals = record.get("capital") or []
    return CountrySummary(
        code=str(record.get("cca2") or "").lower(),
        display_name=name.get("common") or "",
        flag_glyph=record.get("flag") or "",
        population=record.get("population") or 0,
        capital=capitals[0] if capitals else None,
        languages=list((record.get("languages") or {}).values()),
        currency_codes=list((record.get("currencies") or {}).keys()),
        region=record.get("region") or "",
        subregion=record.get("subregion") or "",
        area_km2=record.get("area"),
    )


def _to_profile(record: dict[str, Any]) -> CountryProfile:
    name = record.get("name") or {}
    currencies = {
        code: Currency(name=details.get("name") or "", symbol=details.get("symbol"))
        for code, details in (record.get("currencies") or {}).items()
        if isinstance(details, dict)
    }
    return CountryProfile(
        name=CountryName(
            common=name.get("common") or "", official=name.get("official") or ""
        ),
        capitals=list(record.get("capital") or []),
        continents=list(record.get("continents") or []),
        currencies=currencies,
        languages=dict(record.get("languages") or {}),
        flag_glyph=record.get("flag") or "",
        population=record.get("population") or 0,
    )
