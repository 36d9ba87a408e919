from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..config import Settings, endpoint, get_settings
from ..http_client import get_http_client
from ..models.weather import Coordinates

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GeocodingService:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def resolve_capital(self, capital: str) -> Coordinates | None:
        """Coordinates of the first geocoder match, or None.

        Never raises: transport errors, non-success answers and unusable
        payloads all come back as None for the caller to act on.
        """
        client = self.client or await get_http_client()
        url = endpoint(self.settings.geocoding_base_url, "search")
        try:
            response = await client.get(url, params={"name": capital})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("geocoding %r failed: %s", capital, exc)
            return None

        results = payload.get("results") if isinstance(payload, dict) else None
        first = results[0] if isinstance(results, list) and results else None
        if not isinstance(first, dict):
            logger.info("geocoding %r returned no results", capital)
            return None

        latitude = first.get("latitude")
        longitude = first.get("longitude")
        if latitude is None or longitude is None:
            logger.info("geocoding %r returned a result without coordinates", capital)
            return None
        return Coordinates(
            latitude=latitude, longitude=longitude, timezone=first.get("timezone")
        )
