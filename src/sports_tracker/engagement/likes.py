"""Likes on activities.

A user can like an activity at most once. The `(activity_id, user_id)`
unique constraint enforces this in the store; the pre-check only gives the
common case a clean error without a failed insert.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sports_tracker.database.connection import commit_or_raise
from sports_tracker.database.models import Activity, Like, parse_id
from sports_tracker.exceptions import DuplicateLikeError, NotFoundError
from sports_tracker.models.engagement import LikeResult, LikeStatus

logger = logging.getLogger(__name__)


class LikeService:
    """Like, unlike and count likes on an activity."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _activity_exists(self, activity_id: uuid.UUID | None) -> bool:
        if activity_id is None:
            return False
        result = await self.db.execute(select(Activity.id).where(Activity.id == activity_id))
        return result.scalar_one_or_none() is not None

    async def count(self, activity_id: Any) -> int:
        """Total likes on an activity (0 for unknown activities)."""
        parsed_id = parse_id(activity_id)
        if parsed_id is None:
            return 0
        result = await self.db.execute(
            select(func.count()).select_from(Like).where(Like.activity_id == parsed_id)
        )
        return int(result.scalar_one())

    async def like(self, activity_id: Any, user_id: uuid.UUID) -> LikeResult:
        """Like an activity.

        Returns:
            The new like's id and the activity's updated like count

        Raises:
            NotFoundError: Activity does not exist
            DuplicateLikeError: The user already liked it
        """
        parsed_id = parse_id(activity_id)
        if not await self._activity_exists(parsed_id):
            raise NotFoundError("Activity not found.")

        existing = await self.db.execute(
            select(Like.id).where(Like.activity_id == parsed_id, Like.user_id == user_id)
        )
        if existing.scalar_one_or_none() is not None:
            raise DuplicateLikeError()

        like = Like(activity_id=parsed_id, user_id=user_id)
        self.db.add(like)
        try:
            await commit_or_raise(self.db, "save like")
        except IntegrityError as e:
            if not await self._activity_exists(parsed_id):
                raise NotFoundError("Activity not found.") from e
            raise DuplicateLikeError() from e

        return LikeResult(like_id=like.id, like_count=await self.count(parsed_id))

    async def unlike(self, activity_id: Any, user_id: uuid.UUID) -> int:
        """Remove the user's like.

        Returns:
            The activity's updated like count

        Raises:
            NotFoundError: The user had not liked the activity
        """
        parsed_id = parse_id(activity_id)
        if parsed_id is None:
            raise NotFoundError("Like not found.")

        result = await self.db.execute(
            delete(Like).where(Like.activity_id == parsed_id, Like.user_id == user_id)
        )
        if not result.rowcount:
            raise NotFoundError("Like not found.")

        await commit_or_raise(self.db, "remove like")
        return await self.count(parsed_id)

    async def like_status(self, activity_id: Any, user_id: uuid.UUID) -> LikeStatus:
        """Like count plus whether the user has liked the activity."""
        parsed_id = parse_id(activity_id)
        if parsed_id is None:
            return LikeStatus(like_count=0, user_liked=False)

        liked = await self.db.execute(
            select(Like.id).where(Like.activity_id == parsed_id, Like.user_id == user_id)
        )
        return LikeStatus(
            like_count=await self.count(parsed_id),
            user_liked=liked.scalar_one_or_none() is not None,
        )
