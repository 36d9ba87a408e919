from __future__ import annotations

from datetime import date

from pydantic import Field, model_validator

from .base import CamelModel


class Coordinates(CamelModel):
    latitude: float = Field(description="Latitude in decimal degrees")
    longitude: float = Field(description="Longitude in decimal degrees")
    timezone: str | None = Field(
        default=None, description="IANA timezone reported by the geocoder"
    )


class TemperatureHistory(CamelModel):
    dates: list[date] = Field(
        default_factory=list, description="Calendar dates, ascending"
    )
    daily_average_temperatures: list[float] = Field(
        default_factory=list,
        description="Mean temperature per date in Celsius, index-aligned with dates",
    )

    @model_validator(mode="after")
    def _check_alignment(self) -> TemperatureHistory:
        if len(self.dates) != len(self.daily_average_temperatures):
            raise ValueError("dates and dailyAverageTemperatures must be the same length")
        if any(later <= earlier for earlier, later in zip(self.dates, self.dates[1:])):
            raise ValueError("dates must be strictly ascending")
        return self


class WeatherSnapshot(CamelModel):
    latest_temperature_c: float = Field(description="Most recent temperature reading")
    latest_rain_mm: float = Field(0.0, description="Rain at the latest reading")
    latest_precipitation_mm: float = Field(
        0.0, description="Precipitation at the latest reading"
    )
    # Placeholder: a historical window carries no day/night information.
    is_daytime: bool = Field(True, description="Always true, not derived")
    history: TemperatureHistory = Field(default_factory=TemperatureHistory)
