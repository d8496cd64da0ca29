"""Domain models for the sports tracker."""

from sports_tracker.models.base import CamelModel
from sports_tracker.models.location import Coordinates, Station
from sports_tracker.models.weather import WeatherSnapshot, UNAVAILABLE_CONDITION
from sports_tracker.models.activity import ActivityView, Photo
from sports_tracker.models.engagement import (
    CommentView,
    LikeCount,
    LikeResult,
    LikeStatus,
)
from sports_tracker.models.user import UserView

__all__ = [
    "CamelModel",
    # Location
    "Coordinates",
    "Station",
    # Weather
    "WeatherSnapshot",
    "UNAVAILABLE_CONDITION",
    # Activity
    "ActivityView",
    "Photo",
    # Engagement
    "CommentView",
    "LikeCount",
    "LikeResult",
    "LikeStatus",
    # User
    "UserView",
]
