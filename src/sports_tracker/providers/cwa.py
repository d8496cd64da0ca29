"""Central Weather Administration (Taiwan) observation provider.

## API Documentation Summary
Source: https://opendata.cwa.gov.tw/dist/opendata-swagger.html

## Endpoint
- Base URL: https://opendata.cwa.gov.tw/api/v1/rest/datastore
- Dataset: O-A0003-001 (automatic weather station, current observations)
- Full URL example:
  https://opendata.cwa.gov.tw/api/v1/rest/datastore/O-A0003-001?Authorization=KEY&StationName=臺北

## Authentication
- API key REQUIRED, passed as the `Authorization` query parameter
- Free registration at opendata.cwa.gov.tw

## Response Format
```json
{
  "success": "true",
  "records": {
    "Station": [
      {
        "StationName": "臺北",
        "StationId": "466920",
        "ObsTime": {"DateTime": "2024-01-01T14:00:00+08:00"},
        "WeatherElement": {
          "Weather": "多雲",
          "Now": {"Precipitation": 0.0},
          "WindDirection": 90.0,
          "WindSpeed": 1.8,
          "AirTemperature": 21.3,
          "RelativeHumidity": 72,
          "AirPressure": 1012.4
        }
      }
    ]
  }
}
```

## Variable Translation (CWA -> Canonical)
| CWA Field | Canonical Field | Unit | Notes |
|-----------|-----------------|------|-------|
| Weather | condition | text | Chinese description |
| AirTemperature | temperature_c | °C | Direct mapping |
| RelativeHumidity | humidity | 0-1 | Published as percent |
| WindSpeed | wind_speed_ms | m/s | Direct mapping |
| WindDirection | wind_direction_deg | degrees | 0=N, 90=E |
| AirPressure | pressure_hpa | hPa | Direct mapping |
| Now.Precipitation | precipitation_mm | mm | Since midnight |
| ObsTime.DateTime | observed_at | ISO 8601 | Local time with offset |

## Sentinels
Sensors that are down report `-99` (also seen as `-99.0`, `-999`, `"X"`).
These become None.

## Station names
The dataset spells Taipei/Taichung/Tainan/Taitung with `臺` while most people
type `台`; names are compared with the two folded together.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sports_tracker.models.weather import WeatherSnapshot
from sports_tracker.providers.base import (
    ProviderError,
    StationNotFoundError,
    WeatherProvider,
)

OBSERVATION_DATASET = "O-A0003-001"

SENTINEL_VALUES = {-99.0, -999.0, -9999.0, -9991.0, -9996.0, -9997.0, -9998.0}
NO_CONDITION = "-99"


def fold_station_name(name: str) -> str:
    """Normalize a station name for comparison (`臺` -> `台`, trimmed)."""
    return name.strip().replace("臺", "台")


def _reading(value: Any) -> float | None:
    """Convert a raw element value, mapping sentinels and junk to None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number in SENTINEL_VALUES or number != number:
        return None
    return number


def _parse_obs_time(obs_time: Any) -> datetime | None:
    if not isinstance(obs_time, dict):
        return None
    raw = obs_time.get("DateTime")
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None


class CwaObservationProvider(WeatherProvider):
    """CWA open-data current observation provider.

    Example:
        ```python
        async with CwaObservationProvider(api_key="CWA-XXXX") as provider:
            snapshot = await provider.get_current_conditions("台北")
        ```
    """

    name = "cwa"
    base_url = "https://opendata.cwa.gov.tw/api/v1/rest/datastore"
    requires_api_key = True

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 5.0,
        **kwargs: Any,
    ):
        super().__init__(api_key=api_key, timeout=timeout, **kwargs)
        if base_url:
            self.base_url = base_url.rstrip("/")

    async def get_current_conditions(self, station_name: str) -> WeatherSnapshot:
        """Get the latest observation for a CWA station.

        Raises:
            ProviderError: Missing API key, error status or unparseable body
            StationNotFoundError: The dataset has no such station
        """
        if not self.api_key:
            raise ProviderError("CWA API key is not configured", provider=self.name)

        url = f"{self.base_url}/{OBSERVATION_DATASET}"
        # The dataset spells the name with 臺; filter client-side after folding
        params = {
            "Authorization": self.api_key,
            "StationName": station_name.replace("台", "臺"),
        }

        data = await self._get_json(url, params=params)
        return self._translate_response(data, station_name)

    def _find_station(self, response_data: dict[str, Any], station_name: str) -> dict[str, Any]:
        records = response_data.get("records") if isinstance(response_data, dict) else None
        stations = records.get("Station") if isinstance(records, dict) else None
        if not isinstance(stations, list):
            stations = []

        wanted = fold_station_name(station_name)
        for station in stations:
            if not isinstance(station, dict):
                continue
            if fold_station_name(str(station.get("StationName", ""))) == wanted:
                return station

        raise StationNotFoundError(
            f"No observation for station {station_name}",
            provider=self.name,
        )

    def _translate_response(
        self,
        response_data: dict[str, Any],
        station_name: str,
    ) -> WeatherSnapshot:
        """Translate a CWA observation response to canonical format.

        See module docstring for the field mapping.
        """
        station = self._find_station(response_data, station_name)
        elements = station.get("WeatherElement")
        if not isinstance(elements, dict):
            elements = {}

        condition = str(elements.get("Weather") or "").strip()
        if not condition or condition == NO_CONDITION:
            condition = "Unknown"

        humidity = _reading(elements.get("RelativeHumidity"))
        if humidity is not None:
            humidity = min(max(humidity / 100, 0.0), 1.0)

        wind_speed = _reading(elements.get("WindSpeed"))
        if wind_speed is not None and wind_speed < 0:
            wind_speed = None

        wind_direction = _reading(elements.get("WindDirection"))
        if wind_direction is not None and not 0 <= wind_direction <= 360:
            wind_direction = None

        now = elements.get("Now") or {}
        precipitation = _reading(now.get("Precipitation") if isinstance(now, dict) else None)
        if precipitation is not None and precipitation < 0:
            precipitation = None

        return WeatherSnapshot(
            station_name=str(station.get("StationName") or station_name),
            condition=condition,
            temperature_c=_reading(elements.get("AirTemperature")),
            humidity=humidity,
            wind_speed_ms=wind_speed,
            wind_direction_deg=wind_direction,
            precipitation_mm=precipitation,
            pressure_hpa=_reading(elements.get("AirPressure")),
            observed_at=_parse_obs_time(station.get("ObsTime")),
            provider=self.name,
        )
