"""Observation station registry and nearest-station lookup."""

from __future__ import annotations

import math
from collections.abc import Iterable
from functools import lru_cache

from sports_tracker.models.location import Coordinates, Station

EARTH_RADIUS_KM = 6371.0

# CWA staffed surface stations, north to south then outlying islands.
# Order matters: on an exact distance tie the earlier station wins.
DEFAULT_STATIONS: tuple[Station, ...] = (
    Station.at("台北", 25.0377, 121.5148),
    Station.at("板橋", 24.9976, 121.4420),
    Station.at("基隆", 25.1333, 121.7405),
    Station.at("淡水", 25.1649, 121.4489),
    Station.at("新竹", 24.8279, 121.0142),
    Station.at("梧棲", 24.2561, 120.5237),
    Station.at("台中", 24.1457, 120.6841),
    Station.at("日月潭", 23.8813, 120.9080),
    Station.at("嘉義", 23.4959, 120.4329),
    Station.at("阿里山", 23.5082, 120.8132),
    Station.at("玉山", 23.4876, 120.9595),
    Station.at("台南", 22.9932, 120.2047),
    Station.at("高雄", 22.5660, 120.3157),
    Station.at("恆春", 22.0039, 120.7463),
    Station.at("宜蘭", 24.7640, 121.7565),
    Station.at("蘇澳", 24.5967, 121.8574),
    Station.at("花蓮", 23.9751, 121.6133),
    Station.at("成功", 23.0975, 121.3734),
    Station.at("台東", 22.7522, 121.1546),
    Station.at("大武", 22.3557, 120.8954),
    Station.at("蘭嶼", 22.0370, 121.5583),
    Station.at("澎湖", 23.5654, 119.5627),
    Station.at("金門", 24.4074, 118.2893),
    Station.at("馬祖", 26.1693, 119.9233),
)


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1, lon1 = map(math.radians, a.to_tuple())
    lat2, lon2 = map(math.radians, b.to_tuple())

    d_lat = lat2 - lat1
    d_lon = lon2 - lon1
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


class StationRegistry:
    """Read-only, ordered collection of observation stations.

    Example:
        ```python
        registry = StationRegistry()
        station = registry.nearest(25.04, 121.56)  # -> 台北
        ```
    """

    def __init__(self, stations: Iterable[Station] = DEFAULT_STATIONS):
        self._stations = tuple(stations)
        if not self._stations:
            raise ValueError("A station registry needs at least one station")

    @property
    def stations(self) -> tuple[Station, ...]:
        return self._stations

    def __len__(self) -> int:
        return len(self._stations)

    def get(self, name: str) -> Station | None:
        """Look a station up by name, treating 台 and 臺 as the same character."""
        wanted = name.strip().replace("臺", "台")
        for station in self._stations:
            if station.name.replace("臺", "台") == wanted:
                return station
        return None

    def nearest(self, latitude: float, longitude: float) -> Station:
        """Find the station closest to a point.

        Raises:
            ValueError: Latitude/longitude out of range
        """
        point = Coordinates(latitude=latitude, longitude=longitude)

        best = self._stations[0]
        best_distance = haversine_km(point, best.coordinates)
        for station in self._stations[1:]:
            distance = haversine_km(point, station.coordinates)
            if distance < best_distance:
                best, best_distance = station, distance
        return best


@lru_cache
def get_station_registry() -> StationRegistry:
    """Get the shared default station registry."""
    return StationRegistry()
