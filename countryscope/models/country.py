from __future__ import annotations

from pydantic import Field

from .base import CamelModel
from .weather import WeatherSnapshot


class CountrySummary(CamelModel):
    code: str = Field(description="ISO 3166-1 alpha-2 code, lower case")
    display_name: str = Field(description="Common country name")
    flag_glyph: str = Field("", description="Flag emoji")
    population: int = Field(0, ge=0)
    capital: str | None = Field(default=None, description="First listed capital")
    languages: list[str] = Field(default_factory=list)
    currency_codes: list[str] = Field(default_factory=list)
    region: str = ""
    subregion: str = ""
    area_km2: float | None = Field(default=None, description="Surface area in km2")


class CountryName(CamelModel):
    common: str
    official: str = ""


class Currency(CamelModel):
    name: str = ""
    symbol: str | None = None


class CountryProfile(CamelModel):
    """Country metadata as returned by the lookup by ISO code."""

    name: CountryName
    capitals: list[str] = Field(default_factory=list)
    continents: list[str] = Field(default_factory=list)
    currencies: dict[str, Currency] = Field(default_factory=dict)
    languages: dict[str, str] = Field(default_factory=dict)
    flag_glyph: str = ""
    population: int = Field(0, ge=0)


class CountryDetail(CountryProfile):
    weather: WeatherSnapshot

    @classmethod
    def assemble(
        cls, profile: CountryProfile, weather: WeatherSnapshot
    ) -> CountryDetail:
        return cls(**dict(profile), weather=weather)
