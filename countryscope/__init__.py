"""Country lookup API aggregating country metadata, capital weather and news."""

__version__ = "0.1.0"
