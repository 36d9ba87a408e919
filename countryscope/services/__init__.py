from .aggregator import CountryAggregator
from .countries import CountryService
from .geocoding import GeocodingService
from .news import NewsService
from .weather import WeatherService

__all__ = [
    "CountryAggregator",
    "CountryService",
    "GeocodingService",
    "NewsService",
    "WeatherService",
]
