from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..config import Settings, get_settings
from ..exceptions import AggregationStage, DependencyFailureError
from ..models.country import CountryDetail
from ..models.news import NewsPage
from .countries import CountryService
from .geocoding import GeocodingService
from .news import NewsService
from .weather import WeatherService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CountryAggregator:
    """Builds country details from the metadata, geocoding and weather providers.

    The stages run strictly in sequence since each needs the previous result:
    country record, then capital coordinates, then weather history. The first
    failing stage ends the request; nothing is retried.
    """

    settings: Settings | None = None
    client: httpx.AsyncClient | None = None
    countries: CountryService | None = None
    geocoding: GeocodingService | None = None
    weather: WeatherService | None = None
    news: NewsService | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()
        if self.countries is None:
            self.countries = CountryService(settings=self.settings, client=self.client)
        if self.geocoding is None:
            self.geocoding = GeocodingService(
                settings=self.settings, client=self.client
            )
        if self.weather is None:
            self.weather = WeatherService(settings=self.settings, client=self.client)
        if self.news is None:
            self.news = NewsService(settings=self.settings, client=self.client)

    async def country_detail(self, code: str) -> CountryDetail:
        profile = await self.countries.get_by_code(code)

        if not profile.capitals:
            logger.info("country %s has no capital to geocode", code)
            raise DependencyFailureError(
                AggregationStage.CAPITAL_COORDINATES, "country has no capital"
            )
        capital = profile.capitals[0]
        coordinates = await self.geocoding.resolve_capital(capital)
        if coordinates is None:
            logger.info(
                "aggregation for %s stopped: no coordinates for %r", code, capital
            )
            raise DependencyFailureError(AggregationStage.CAPITAL_COORDINATES, capital)

        snapshot = await self.weather.fetch_history(coordinates)
        if snapshot is None:
            logger.info("aggregation for %s stopped: no weather for %r", code, capital)
            raise DependencyFailureError(AggregationStage.WEATHER, capital)

        logger.info("aggregated country detail for %s", code)
        return CountryDetail.assemble(profile, snapshot)

    async def country_news(self, code: str, cursor: str | None = None) -> NewsPage:
        """One page of news about the country, keyed by its common name."""
        profile = await self.countries.get_by_code(code)
        return await self.news.fetch_page(profile.name.common, cursor)
