"""User models exposed to clients."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Self

from sports_tracker.models.base import CamelModel

if TYPE_CHECKING:
    from sports_tracker.database.models import User


class UserView(CamelModel):
    """Public identity of a user. The password hash is never included."""

    id: uuid.UUID
    username: str
    display_name: str | None = None

    @classmethod
    def from_record(cls, user: User) -> Self:
        return cls(id=user.id, username=user.username, display_name=user.display_name)
