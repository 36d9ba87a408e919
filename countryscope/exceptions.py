from __future__ import annotations

from enum import Enum


class AggregationStage(str, Enum):
    """Steps of the country detail build that can fail after the lookup."""

    CAPITAL_COORDINATES = "capital-coordinates"
    WEATHER = "weather"


class CountryScopeError(Exception):
    """Base class for every error surfaced by the lookup services."""


class CountryNotFoundError(CountryScopeError):
    """Raised when the country metadata provider does not know the country."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Country not found: {code}")
        self.code = code


class DependencyFailureError(CountryScopeError):
    """Raised when a required aggregation stage returned no usable data."""

    def __init__(self, stage: AggregationStage, detail: str | None = None) -> None:
        message = f"Failed to resolve {stage.value}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.stage = stage
        self.detail = detail


class UpstreamError(CountryScopeError):
    """Raised on transport failures or non-success answers from a provider."""

    def __init__(
        self, provider: str, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code
