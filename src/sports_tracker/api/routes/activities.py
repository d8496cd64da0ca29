"""Activity routes.

Create and update accept either a JSON body or a multipart form. A multipart
form may carry the photo in a `photo` file field; the other fields use the
same camelCase names as the JSON body.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

import pydantic
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from sports_tracker.activities.fields import parse_boolean_flag
from sports_tracker.activities.repository import ActivityRepository
from sports_tracker.api.routes import envelope
from sports_tracker.auth.dependencies import get_current_user_id
from sports_tracker.config import get_settings
from sports_tracker.database.connection import get_db_session
from sports_tracker.exceptions import ValidationError
from sports_tracker.models.activity import Photo
from sports_tracker.models.base import CamelModel

router = APIRouter()

PHOTO_FIELD = "photo"


class ActivityPayload(CamelModel):
    """Activity fields as sent by clients.

    Kept loosely typed; the repository does the coercion so JSON and form
    submissions share one set of rules.
    """

    date: Any = None
    sport: Any = None
    duration_minutes: Any = None
    intensity: str | None = None
    notes: str | None = None
    is_public: Any = None
    remove_photo: Any = None


async def get_activity_repository(
    db: AsyncSession = Depends(get_db_session),
) -> ActivityRepository:
    return ActivityRepository(db)


async def _read_photo(upload: Any) -> Photo | None:
    if not isinstance(upload, UploadFile):
        return None
    # One byte past the ceiling is enough to reject an oversized upload
    data = await upload.read(get_settings().photo_max_bytes + 1)
    if not data:
        return None
    return Photo(media_type=upload.content_type or "", data=data)


async def read_activity_payload(request: Request) -> tuple[ActivityPayload, Photo | None]:
    """Parse a JSON or multipart activity body into fields plus an optional photo."""
    content_type = request.headers.get("content-type", "").lower()
    photo = None

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        photo = await _read_photo(form.get(PHOTO_FIELD))
        fields = {key: value for key, value in form.items() if key != PHOTO_FIELD}
    else:
        raw = await request.body()
        if not raw.strip():
            fields = {}
        else:
            try:
                fields = json.loads(raw)
            except ValueError:
                raise ValidationError("Request body must be valid JSON.")
        if not isinstance(fields, dict):
            raise ValidationError("Request body must be a JSON object.")

    try:
        payload = ActivityPayload.model_validate(fields)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid activity fields: {e.error_count()} error(s).") from e

    return payload, photo


@router.get("")
async def list_own_activities(
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: ActivityRepository = Depends(get_activity_repository),
) -> dict:
    """The caller's activities, newest first."""
    return envelope(await repo.list_own(user_id))


# Declared before /{activity_id} so "public" is not taken for an id
@router.get("/public")
async def list_public_activities(
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: ActivityRepository = Depends(get_activity_repository),
) -> dict:
    """Every public activity, newest first."""
    return envelope(await repo.list_public(user_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_activity(
    request: Request,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: ActivityRepository = Depends(get_activity_repository),
) -> dict:
    """Record a new activity."""
    payload, photo = await read_activity_payload(request)
    view = await repo.create(
        user_id,
        date=payload.date,
        sport=payload.sport,
        duration_minutes=payload.duration_minutes,
        intensity=payload.intensity,
        notes=payload.notes,
        is_public=payload.is_public,
        photo=photo,
    )
    return envelope(view)


@router.get("/{activity_id}")
async def get_activity(
    activity_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: ActivityRepository = Depends(get_activity_repository),
) -> dict:
    """One of the caller's own activities."""
    return envelope(await repo.get(activity_id, user_id))


@router.put("/{activity_id}")
async def update_activity(
    activity_id: str,
    request: Request,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: ActivityRepository = Depends(get_activity_repository),
) -> dict:
    """Replace an activity's fields. The photo is kept unless replaced or removed."""
    payload, photo = await read_activity_payload(request)
    view = await repo.update(
        activity_id,
        user_id,
        date=payload.date,
        sport=payload.sport,
        duration_minutes=payload.duration_minutes,
        intensity=payload.intensity,
        notes=payload.notes,
        is_public=payload.is_public,
        photo=photo,
        remove_photo=parse_boolean_flag(payload.remove_photo),
    )
    return envelope(view)


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: ActivityRepository = Depends(get_activity_repository),
) -> dict:
    """Delete an activity together with its likes and comments."""
    deleted_id = await repo.delete(activity_id, user_id)
    return envelope({"id": deleted_id})
