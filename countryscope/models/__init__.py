from .country import (
    CountryDetail,
    CountryName,
    CountryProfile,
    CountrySummary,
    Currency,
)
from .news import NewsArticle, NewsPage
from .weather import Coordinates, TemperatureHistory, WeatherSnapshot

__all__ = [
    "Coordinates",
    "CountryDetail",
    "CountryName",
    "CountryProfile",
    "CountrySummary",
    "Currency",
    "NewsArticle",
    "NewsPage",
    "TemperatureHistory",
    "WeatherSnapshot",
]
