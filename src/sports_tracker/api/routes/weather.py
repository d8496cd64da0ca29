"""Weather route.

Always answers 200: when no observation can be fetched the snapshot is
marked `available: false` instead of failing the request.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from sports_tracker.api.routes import envelope
from sports_tracker.auth.dependencies import get_current_user_id
from sports_tracker.weather.resolver import WeatherResolver

router = APIRouter()


async def get_weather_resolver() -> WeatherResolver:
    return WeatherResolver()


@router.get("")
async def current_weather(
    lat: str | None = None,
    lon: str | None = None,
    user_id: uuid.UUID = Depends(get_current_user_id),
    resolver: WeatherResolver = Depends(get_weather_resolver),
) -> dict:
    """Current conditions at the station nearest to `lat`/`lon`.

    Without usable coordinates the configured default station is used.
    """
    return envelope(await resolver.current_conditions(lat, lon))
