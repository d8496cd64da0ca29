"""Best-effort current conditions for a caller's location.

The resolver maps coordinates to the nearest registered station and asks the
observation provider for that station's latest reading. Weather is a nicety:
any provider problem (no API key, timeout, error status, unknown station)
produces a degraded snapshot instead of an error.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from sports_tracker.config import get_settings
from sports_tracker.models.location import Station
from sports_tracker.models.weather import WeatherSnapshot
from sports_tracker.providers.base import ProviderError, WeatherProvider
from sports_tracker.providers.cwa import CwaObservationProvider
from sports_tracker.weather.stations import StationRegistry, get_station_registry

logger = logging.getLogger(__name__)


def _coerce_coordinate(value: Any, limit: float) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or not -limit <= number <= limit:
        return None
    return number


class WeatherResolver:
    """Resolve coordinates to a weather snapshot.

    Args:
        provider: Observation provider; defaults to a CWA provider built from
            settings for each lookup
        registry: Station registry; defaults to the shared registry
        default_station: Station name used without usable coordinates
    """

    def __init__(
        self,
        provider: WeatherProvider | None = None,
        registry: StationRegistry | None = None,
        default_station: str | None = None,
    ):
        settings = get_settings()
        self.provider = provider
        self.registry = registry or get_station_registry()
        self.default_station = default_station or settings.weather_default_station

    def resolve_station(self, lat: Any = None, lon: Any = None) -> str:
        """Pick the station name for a location; falls back to the default station."""
        latitude = _coerce_coordinate(lat, 90)
        longitude = _coerce_coordinate(lon, 180)
        if latitude is None or longitude is None:
            return self.default_station

        station: Station = self.registry.nearest(latitude, longitude)
        return station.name

    def _build_provider(self) -> WeatherProvider:
        settings = get_settings()
        return CwaObservationProvider(
            api_key=settings.cwa_api_key,
            base_url=settings.cwa_base_url,
            timeout=settings.weather_timeout_seconds,
        )

    async def _observe(self, station_name: str) -> WeatherSnapshot:
        if self.provider is not None:
            return await self.provider.get_current_conditions(station_name)

        async with self._build_provider() as provider:
            return await provider.get_current_conditions(station_name)

    async def current_conditions(self, lat: Any = None, lon: Any = None) -> WeatherSnapshot:
        """Get current conditions near a point.

        Never raises; problems yield `WeatherSnapshot.unavailable(...)`.
        """
        station_name = self.resolve_station(lat, lon)
        provider_name = self.provider.name if self.provider is not None else CwaObservationProvider.name

        if self.provider is None and not get_settings().weather_configured:
            logger.warning(f"Weather unavailable for {station_name}: CWA API key is not configured")
            return WeatherSnapshot.unavailable(station_name, provider=provider_name)

        try:
            return await self._observe(station_name)
        except ProviderError as e:
            logger.warning(f"Weather unavailable for {station_name}: {e.message}")
        except httpx.HTTPError as e:
            logger.warning(f"Weather unavailable for {station_name}: {type(e).__name__}: {e}")
        except ValueError as e:
            logger.warning(f"Weather unavailable for {station_name}: malformed observation ({e})")

        return WeatherSnapshot.unavailable(station_name, provider=provider_name)
