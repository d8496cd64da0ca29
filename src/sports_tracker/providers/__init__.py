"""Weather data providers."""

from sports_tracker.providers.base import (
    ProviderError,
    RateLimitError,
    StationNotFoundError,
    WeatherProvider,
)
from sports_tracker.providers.cwa import CwaObservationProvider

__all__ = [
    "WeatherProvider",
    "ProviderError",
    "RateLimitError",
    "StationNotFoundError",
    "CwaObservationProvider",
]
