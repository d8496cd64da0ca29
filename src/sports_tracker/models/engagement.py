"""Like and comment models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sports_tracker.models.base import CamelModel


class LikeResult(CamelModel):
    """Outcome of liking an activity."""

    like_id: uuid.UUID
    like_count: int


class LikeCount(CamelModel):
    """Like total after unliking."""

    like_count: int


class LikeStatus(CamelModel):
    """Like total plus whether the caller is among the likers."""

    like_count: int
    user_liked: bool


class CommentView(CamelModel):
    """A comment enriched with its author's identity."""

    id: uuid.UUID
    activity_id: uuid.UUID
    content: str
    user_id: uuid.UUID
    user_name: str
    user_display_name: str | None = None
    created_at: datetime | None = None
