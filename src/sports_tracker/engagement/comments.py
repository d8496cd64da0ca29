"""Comments on activities.

Any authenticated user may comment on an existing activity; only the author
may delete a comment. Unlike activities, a comment that exists but belongs
to someone else yields ForbiddenError rather than NotFoundError.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sports_tracker.database.connection import commit_or_raise
from sports_tracker.database.models import Activity, Comment, User, parse_id
from sports_tracker.exceptions import ForbiddenError, NotFoundError, ValidationError
from sports_tracker.models.engagement import CommentView

logger = logging.getLogger(__name__)


def _to_view(comment: Comment, username: str, display_name: str | None) -> CommentView:
    return CommentView(
        id=comment.id,
        activity_id=comment.activity_id,
        content=comment.content,
        user_id=comment.user_id,
        user_name=username,
        user_display_name=display_name,
        created_at=comment.created_at,
    )


class CommentService:
    """Add, list and delete comments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_comment(
        self, activity_id: Any, user_id: uuid.UUID, content: Any
    ) -> CommentView:
        """Comment on an activity.

        Raises:
            ValidationError: Content empty after trimming
            NotFoundError: Activity does not exist
        """
        text = "" if content is None else str(content).strip()
        if not text:
            raise ValidationError("Comment content is required.")

        parsed_id = parse_id(activity_id)
        exists = None
        if parsed_id is not None:
            result = await self.db.execute(select(Activity.id).where(Activity.id == parsed_id))
            exists = result.scalar_one_or_none()
        if exists is None:
            raise NotFoundError("Activity not found.")

        author = await self.db.get(User, user_id)
        if author is None:
            raise NotFoundError("User not found.")

        comment = Comment(activity_id=parsed_id, user_id=user_id, content=text)
        self.db.add(comment)
        await commit_or_raise(self.db, "save comment")

        logger.info(f"Comment {comment.id} added to activity {parsed_id}")
        return _to_view(comment, author.username, author.display_name)

    async def list_comments(self, activity_id: Any) -> list[CommentView]:
        """Comments on an activity, oldest first."""
        parsed_id = parse_id(activity_id)
        if parsed_id is None:
            return []

        result = await self.db.execute(
            select(Comment, User.username, User.display_name)
            .join(User, Comment.user_id == User.id)
            .where(Comment.activity_id == parsed_id)
            .order_by(Comment.created_at.asc())
        )
        return [
            _to_view(comment, username, display_name)
            for comment, username, display_name in result.all()
        ]

    async def delete_comment(self, comment_id: Any, caller_id: uuid.UUID) -> uuid.UUID:
        """Delete one of the caller's comments.

        Returns:
            The deleted comment's id

        Raises:
            NotFoundError: No such comment
            ForbiddenError: The caller is not the author
        """
        parsed_id = parse_id(comment_id)
        comment = await self.db.get(Comment, parsed_id) if parsed_id else None
        if comment is None:
            raise NotFoundError("Comment not found.")

        if comment.user_id != caller_id:
            raise ForbiddenError("You can only delete your own comments.")

        await self.db.delete(comment)
        await commit_or_raise(self.db, "delete comment")

        logger.info(f"Comment {parsed_id} deleted by user {caller_id}")
        return parsed_id
