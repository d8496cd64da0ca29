"""Activity models returned by the activity repository."""

from __future__ import annotations

import base64
import datetime as dt
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from pydantic import Field

from sports_tracker.models.base import CamelModel

if TYPE_CHECKING:
    from sports_tracker.database.models import Activity


@dataclass(frozen=True)
class Photo:
    """An inline photo: declared media type plus raw bytes."""

    media_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def to_data_url(self) -> str:
        """Render as a self-describing `data:` URL."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"


class ActivityView(CamelModel):
    """An activity as presented to clients.

    `owner_name` is the owner's display name; `is_owner` tells the viewer
    whether the activity is their own (always true in `list_own`).
    """

    id: uuid.UUID
    date: dt.date = Field(..., description="Calendar date, serialized as YYYY-MM-DD")
    sport: str
    duration_minutes: int = Field(..., gt=0)
    intensity: str = "moderate"
    notes: str = ""
    photo_url: str | None = None
    is_public: bool = False
    owner_id: uuid.UUID
    owner_name: str | None = None
    is_owner: bool = True
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @classmethod
    def from_record(
        cls,
        activity: Activity,
        owner_name: str | None = None,
        viewer_id: uuid.UUID | None = None,
    ) -> Self:
        """Build a view from a database row.

        Args:
            activity: Activity row
            owner_name: Owner's display name (joined by the caller)
            viewer_id: Requesting user; defaults to the owner
        """
        photo_url = None
        if activity.photo_data and activity.photo_media_type:
            photo_url = Photo(activity.photo_media_type, activity.photo_data).to_data_url()

        return cls(
            id=activity.id,
            date=activity.date,
            sport=activity.sport,
            duration_minutes=activity.duration_minutes,
            intensity=activity.intensity,
            notes=activity.notes or "",
            photo_url=photo_url,
            is_public=bool(activity.is_public),
            owner_id=activity.owner_id,
            owner_name=owner_name,
            is_owner=viewer_id is None or activity.owner_id == viewer_id,
            created_at=activity.created_at,
            updated_at=activity.updated_at,
        )
