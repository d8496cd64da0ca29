"""Nearest-station weather lookup."""

from sports_tracker.weather.resolver import WeatherResolver
from sports_tracker.weather.stations import (
    DEFAULT_STATIONS,
    StationRegistry,
    get_station_registry,
    haversine_km,
)

__all__ = [
    "DEFAULT_STATIONS",
    "StationRegistry",
    "WeatherResolver",
    "get_station_registry",
    "haversine_km",
]
