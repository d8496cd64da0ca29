"""Points on the map and the observation stations placed on them."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """A WGS84 position in decimal degrees (north and east positive)."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def to_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class Station(BaseModel):
    """An observation station, named as the upstream dataset publishes it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    coordinates: Coordinates

    @classmethod
    def at(cls, name: str, latitude: float, longitude: float) -> Self:
        return cls(name=name, coordinates=Coordinates(latitude=latitude, longitude=longitude))
