"""Current-conditions weather models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Self

from pydantic import Field

from sports_tracker.models.base import CamelModel

UNAVAILABLE_CONDITION = "Weather data unavailable"

CARDINAL_DIRECTIONS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeatherSnapshot(CamelModel):
    """Latest observation at a station.

    Numeric readings the station did not report are None, never 0, so a
    missing sensor is not mistaken for a real zero reading.
    """

    station_name: str
    available: bool = True
    condition: str = Field(..., description="Free-text condition, e.g. '晴' or 'Cloudy'")
    temperature_c: float | None = None
    humidity: float | None = Field(
        default=None, ge=0, le=1, description="Relative humidity as a 0-1 fraction"
    )
    wind_speed_ms: float | None = Field(default=None, ge=0)
    wind_direction_deg: float | None = Field(default=None, ge=0, le=360)
    precipitation_mm: float | None = Field(default=None, ge=0)
    pressure_hpa: float | None = None
    observed_at: datetime | None = None
    provider: str | None = None
    last_updated: datetime = Field(default_factory=_utcnow)

    @classmethod
    def unavailable(cls, station_name: str, provider: str | None = None) -> Self:
        """Degraded snapshot used when no real observation could be fetched."""
        return cls(
            station_name=station_name,
            available=False,
            condition=UNAVAILABLE_CONDITION,
            provider=provider,
        )

    @property
    def humidity_percent(self) -> float | None:
        """Relative humidity as a percentage."""
        return self.humidity * 100 if self.humidity is not None else None

    def wind_cardinal(self) -> str | None:
        """Get cardinal wind direction (N, NE, E, etc.)."""
        if self.wind_direction_deg is None:
            return None
        index = round(self.wind_direction_deg / 22.5) % 16
        return CARDINAL_DIRECTIONS[index]
