from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from ..config import Settings, endpoint, get_settings
from ..http_client import get_http_client
from ..models.weather import Coordinates, TemperatureHistory, WeatherSnapshot

logger = logging.getLogger(__name__)

HOURLY_VARIABLES = "temperature_2m,rain,precipitation"
ONE_DECIMAL = Decimal("0.1")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class WeatherService:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None
    clock: Callable[[], datetime] = field(default=_utcnow)

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    def history_window(self, tz_name: str | None = None) -> tuple[date, date]:
        """Inclusive (start, end) dates ending today in the location's timezone."""
        today = self.clock().astimezone(_zone(tz_name)).date()
        return today - timedelta(days=self.settings.weather_history_days), today

    async def fetch_history(self, coordinates: Coordinates) -> WeatherSnapshot | None:
        client = self.client or await get_http_client()
        start, end = self.history_window(coordinates.timezone)
        params = {
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "hourly": HOURLY_VARIABLES,
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "timezone": "auto",
        }
        url = endpoint(self.settings.weather_base_url, "forecast")
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "weather history for %s,%s failed: %s",
                coordinates.latitude,
                coordinates.longitude,
                exc,
            )
            return None

        hourly = payload.get("hourly") if isinstance(payload, dict) else None
        if not isinstance(hourly, dict):
            logger.warning("weather payload has no hourly block")
            return None
        return build_snapshot(hourly)


def build_snapshot(hourly: dict[str, Any]) -> WeatherSnapshot | None:
    """Reduce the provider's hourly arrays to a snapshot, None without readings."""
    times = hourly.get("time") or []
    temperatures = hourly.get("temperature_2m") or []
    latest = latest_reading_index(temperatures)
    if latest is None:
        return None

    dates, averages = daily_averages(times, temperatures)
    return WeatherSnapshot(
        latest_temperature_c=temperatures[latest],
        latest_rain_mm=_value_at(hourly.get("rain"), latest),
        latest_precipitation_mm=_value_at(hourly.get("precipitation"), latest),
        is_daytime=True,
        history=TemperatureHistory(dates=dates, daily_average_temperatures=averages),
    )


def latest_reading_index(temperatures: Sequence[float | None]) -> int | None:
    for index in range(len(temperatures) - 1, -1, -1):
        if temperatures[index] is not None:
            return index
    return None


def daily_averages(
    times: Sequence[str], temperatures: Sequence[float | None]
) -> tuple[list[date], list[float]]:
    """Mean temperature per calendar date, ascending, rounded half-up to 0.1.

    Readings are summed as decimals of their textual value so that averages
    such as 10.05 round the way they read rather than the way they are stored.
    """
    grouped: dict[date, list[Decimal]] = defaultdict(list)
    for timestamp, temperature in zip(times, temperatures):
        if temperature is None or not timestamp:
            continue
        try:
            day = date.fromisoformat(str(timestamp).split("T", 1)[0])
        except ValueError:
            continue
        grouped[day].append(Decimal(str(temperature)))

    dates = sorted(grouped)
    averages = [
        float(
            (sum(grouped[day]) / len(grouped[day])).quantize(
                ONE_DECIMAL, rounding=ROUND_HALF_UP
            )
        )
        for day in dates
    ]
    return dates, averages


def _value_at(series: Sequence[float | None] | None, index: int) -> float:
    if not series or index >= len(series) or series[index] is None:
        return 0.0
    return float(series[index])


def _zone(tz_name: str | None) -> timezone | ZoneInfo:
    if not tz_name:
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.info("unknown timezone %r, using UTC", tz_name)
        return timezone.utc
