"""Like and comment routes."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sports_tracker.api.routes import envelope
from sports_tracker.auth.dependencies import get_current_user_id
from sports_tracker.database.connection import get_db_session
from sports_tracker.engagement import CommentService, LikeService
from sports_tracker.models.base import CamelModel
from sports_tracker.models.engagement import LikeCount

router = APIRouter()


class CommentRequest(CamelModel):
    """New comment body."""

    content: Any = None


async def get_like_service(db: AsyncSession = Depends(get_db_session)) -> LikeService:
    return LikeService(db)


async def get_comment_service(db: AsyncSession = Depends(get_db_session)) -> CommentService:
    return CommentService(db)


@router.post("/activities/{activity_id}/like")
async def like_activity(
    activity_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    likes: LikeService = Depends(get_like_service),
) -> dict:
    return envelope(await likes.like(activity_id, user_id))


@router.delete("/activities/{activity_id}/like")
async def unlike_activity(
    activity_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    likes: LikeService = Depends(get_like_service),
) -> dict:
    like_count = await likes.unlike(activity_id, user_id)
    return envelope(LikeCount(like_count=like_count))


@router.get("/activities/{activity_id}/likes")
async def get_like_status(
    activity_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    likes: LikeService = Depends(get_like_service),
) -> dict:
    """Like count and whether the caller has liked the activity."""
    return envelope(await likes.like_status(activity_id, user_id))


@router.post("/activities/{activity_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    activity_id: str,
    body: CommentRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    comments: CommentService = Depends(get_comment_service),
) -> dict:
    return envelope(await comments.add_comment(activity_id, user_id, body.content))


@router.get("/activities/{activity_id}/comments")
async def list_comments(
    activity_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    comments: CommentService = Depends(get_comment_service),
) -> dict:
    """Comments on an activity, oldest first."""
    return envelope(await comments.list_comments(activity_id))


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    comments: CommentService = Depends(get_comment_service),
) -> dict:
    """Delete a comment. Only its author may do so."""
    deleted_id = await comments.delete_comment(comment_id, user_id)
    return envelope({"id": deleted_id})
