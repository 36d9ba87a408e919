from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="", extra="ignore", populate_by_name=True, frozen=True
    )

    http_timeout: float = Field(10.0, gt=0, alias="HTTP_TIMEOUT")
    http_max_connections: int = Field(20, ge=1, alias="HTTP_MAX_CONNECTIONS")
    http_max_keepalive: int = Field(10, ge=1, alias="HTTP_MAX_KEEPALIVE")
    http_user_agent: str = Field(
        "CountryScope/0.1 (+https://example.com; contact=admin@example.com)",
        alias="HTTP_USER_AGENT",
    )

    rest_countries_base_url: HttpUrl = Field(
        "https://restcountries.com/v3.1", alias="REST_COUNTRIES_BASE_URL"
    )
    geocoding_base_url: HttpUrl = Field(
        "https://geocoding-api.open-meteo.com/v1", alias="GEOCODING_BASE_URL"
    )
    weather_base_url: HttpUrl = Field(
        "https://api.open-meteo.com/v1", alias="WEATHER_BASE_URL"
    )
    news_base_url: HttpUrl = Field("https://newsdata.io/api/1", alias="NEWS_BASE_URL")
    news_api_key: str | None = Field(default=None, alias="NEWS_API_KEY")

    search_min_query_length: int = Field(2, ge=1, alias="SEARCH_MIN_QUERY_LENGTH")
    search_result_limit: int = Field(10, ge=1, alias="SEARCH_RESULT_LIMIT")
    weather_history_days: int = Field(7, ge=1, le=90, alias="WEATHER_HISTORY_DAYS")

    # Comma separated list of origins allowed to call the API from a browser.
    cors_allow_origins: str = Field("*", alias="CORS_ALLOW_ORIGINS")
    log_level: LogLevel = Field("INFO", alias="LOG_LEVEL")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @property
    def cors_origins(self) -> list[str]:
        origins = (origin.strip() for origin in self.cors_allow_origins.split(","))
        return [origin for origin in origins if origin]


def endpoint(base_url: HttpUrl, path: str) -> str:
    """Join a configured base URL and a provider path without doubling slashes."""
    return f"{str(base_url).rstrip('/')}/{path.lstrip('/')}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
