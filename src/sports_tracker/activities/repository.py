"""Activity repository.

Owns activity records and enforces owner-only mutation.

## Ownership policy

Update and delete look activities up by `(id, owner_id)` in a single
predicate. An activity that exists but belongs to someone else is reported
exactly like one that does not exist (`NotFoundError`), so callers cannot
probe for other users' private records.

## Ordering

Both listings are newest-created first.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sports_tracker.activities.fields import (
    coerce_duration,
    is_missing,
    normalize_date,
    parse_boolean_flag,
)
from sports_tracker.activities.photos import validate_photo
from sports_tracker.database.connection import commit_or_raise
from sports_tracker.database.models import Activity, User, parse_id, utcnow
from sports_tracker.exceptions import NotFoundError, ValidationError
from sports_tracker.models.activity import ActivityView, Photo

logger = logging.getLogger(__name__)

DEFAULT_INTENSITY = "moderate"
ACTIVITY_NOT_FOUND = "Activity not found."


def _required_fields(date: Any, sport: Any, duration_minutes: Any) -> tuple[Any, str, int]:
    if is_missing(date) or is_missing(sport) or is_missing(duration_minutes):
        raise ValidationError("date, sport, and durationMinutes are required fields.")

    return normalize_date(date), str(sport).strip(), coerce_duration(duration_minutes)


def _checked_photo(photo: Photo | None) -> Photo | None:
    if photo is None:
        return None
    return validate_photo(photo.media_type, photo.data)


class ActivityRepository:
    """CRUD for activities, scoped to the calling user.

    Example:
        ```python
        repo = ActivityRepository(db)
        view = await repo.create(user_id, "2024-01-01", "Run", 30)
        mine = await repo.list_own(user_id)
        feed = await repo.list_public(user_id)
        ```
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _owner_name(self, owner_id: uuid.UUID) -> str | None:
        owner = await self.db.get(User, owner_id)
        return owner.display_name if owner else None

    async def _get_owned(self, activity_id: Any, caller_id: uuid.UUID) -> Activity:
        parsed_id = parse_id(activity_id)
        if parsed_id is None:
            raise NotFoundError(ACTIVITY_NOT_FOUND)

        result = await self.db.execute(
            select(Activity).where(Activity.id == parsed_id, Activity.owner_id == caller_id)
        )
        activity = result.scalar_one_or_none()

        if activity is None:
            raise NotFoundError(ACTIVITY_NOT_FOUND)
        return activity

    async def create(
        self,
        owner_id: uuid.UUID,
        date: Any,
        sport: Any,
        duration_minutes: Any,
        intensity: str | None = None,
        notes: str | None = None,
        is_public: Any = None,
        photo: Photo | None = None,
    ) -> ActivityView:
        """Record a new activity for its owner.

        Raises:
            ValidationError: Missing date/sport/duration, bad date, or
                non-positive duration; non-image photo
            PayloadTooLargeError: Photo over the size ceiling
        """
        activity_date, sport, duration = _required_fields(date, sport, duration_minutes)
        photo = _checked_photo(photo)

        activity = Activity(
            owner_id=owner_id,
            date=activity_date,
            sport=sport,
            duration_minutes=duration,
            intensity=intensity or DEFAULT_INTENSITY,
            notes=notes or "",
            is_public=parse_boolean_flag(is_public, default=False),
            photo_data=photo.data if photo else None,
            photo_media_type=photo.media_type if photo else None,
        )
        self.db.add(activity)
        await commit_or_raise(self.db, "save activity")

        logger.info(f"Activity {activity.id} created by user {owner_id}")
        return ActivityView.from_record(activity, await self._owner_name(owner_id))

    async def get(self, activity_id: Any, caller_id: uuid.UUID) -> ActivityView:
        """Fetch one of the caller's own activities."""
        activity = await self._get_owned(activity_id, caller_id)
        return ActivityView.from_record(activity, await self._owner_name(caller_id))

    async def list_own(self, owner_id: uuid.UUID) -> list[ActivityView]:
        """All of the caller's activities, newest first."""
        result = await self.db.execute(
            select(Activity, User.display_name)
            .join(User, Activity.owner_id == User.id)
            .where(Activity.owner_id == owner_id)
            .order_by(Activity.created_at.desc())
        )
        return [
            ActivityView.from_record(activity, owner_name)
            for activity, owner_name in result.all()
        ]

    async def list_public(self, viewer_id: uuid.UUID) -> list[ActivityView]:
        """Every public activity, newest first, flagged with `is_owner` for the viewer."""
        result = await self.db.execute(
            select(Activity, User.display_name)
            .join(User, Activity.owner_id == User.id)
            .where(Activity.is_public.is_(True))
            .order_by(Activity.created_at.desc())
        )
        return [
            ActivityView.from_record(activity, owner_name, viewer_id=viewer_id)
            for activity, owner_name in result.all()
        ]

    async def update(
        self,
        activity_id: Any,
        caller_id: uuid.UUID,
        date: Any,
        sport: Any,
        duration_minutes: Any,
        intensity: str | None = None,
        notes: str | None = None,
        is_public: Any = None,
        photo: Photo | None = None,
        remove_photo: bool = False,
    ) -> ActivityView:
        """Replace an activity's fields.

        The existing photo is kept unless a new one is supplied or
        `remove_photo` is set. An absent or unrecognised visibility flag
        makes the activity private.

        Raises:
            NotFoundError: No such activity owned by the caller
            ValidationError: Same rules as create
        """
        activity_date, sport, duration = _required_fields(date, sport, duration_minutes)
        photo = _checked_photo(photo)

        activity = await self._get_owned(activity_id, caller_id)

        activity.date = activity_date
        activity.sport = sport
        activity.duration_minutes = duration
        activity.intensity = intensity or DEFAULT_INTENSITY
        activity.notes = notes or ""
        activity.is_public = parse_boolean_flag(is_public, default=False)
        if photo is not None:
            activity.photo_data = photo.data
            activity.photo_media_type = photo.media_type
        elif remove_photo:
            activity.photo_data = None
            activity.photo_media_type = None
        activity.updated_at = utcnow()

        await commit_or_raise(self.db, "update activity")

        logger.info(f"Activity {activity.id} updated by user {caller_id}")
        return ActivityView.from_record(activity, await self._owner_name(caller_id))

    async def delete(self, activity_id: Any, caller_id: uuid.UUID) -> uuid.UUID:
        """Delete one of the caller's activities along with its likes and comments.

        Returns:
            The deleted activity's id

        Raises:
            NotFoundError: No such activity owned by the caller
        """
        activity = await self._get_owned(activity_id, caller_id)
        deleted_id = activity.id

        await self.db.delete(activity)
        await commit_or_raise(self.db, "delete activity")

        logger.info(f"Activity {deleted_id} deleted by user {caller_id}")
        return deleted_id
