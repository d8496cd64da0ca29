"""Activity records: creation, listing, owner-only mutation and photos."""

from sports_tracker.activities.fields import (
    coerce_duration,
    normalize_date,
    parse_boolean_flag,
)
from sports_tracker.activities.photos import validate_photo
from sports_tracker.activities.repository import ActivityRepository

__all__ = [
    "ActivityRepository",
    "coerce_duration",
    "normalize_date",
    "parse_boolean_flag",
    "validate_photo",
]
