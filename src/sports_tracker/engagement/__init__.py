"""Engagement on activities: likes and comments."""

from sports_tracker.engagement.comments import CommentService
from sports_tracker.engagement.likes import LikeService

__all__ = ["CommentService", "LikeService"]
