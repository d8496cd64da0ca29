"""Database models for the sports tracker.

## Schema Overview

```
users
├── sessions (1:N)
├── activities (1:N)
│   ├── likes (1:N)      unique (activity_id, user_id)
│   └── comments (1:N)
├── likes (1:N)          authored by the user
└── comments (1:N)       authored by the user
```

Every foreign key is `ON DELETE CASCADE` and every parent relationship
cascades at the ORM level as well, so deleting a user or an activity never
leaves orphaned sessions, likes or comments behind.

## Notes

- Password hashes are bcrypt strings; plaintext passwords are never stored.
- Photos are stored inline (bytes + media type) so an activity row is
  self-contained.
- `date` is a calendar date column with no time component.
"""

from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> dt.datetime:
    """Current UTC time, with microseconds, for row timestamps."""
    return dt.datetime.now(dt.timezone.utc)


def parse_id(value: object) -> uuid.UUID | None:
    """Parse a client-supplied identifier; None if it is not a valid UUID."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class Base(DeclarativeBase):
    """Base class for all database models."""


class User(Base):
    """User account model.

    The username is unique and compared exactly (after trimming at the
    service layer).
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    sessions: Mapped[list["LoginSession"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    activities: Mapped[list["Activity"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )
    likes: Mapped[list["Like"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class LoginSession(Base):
    """Login session.

    The token is an opaque random string; holding it proves a prior login
    until the session row is deleted.
    """

    __tablename__ = "sessions"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user: Mapped["User"] = relationship(back_populates="sessions")

    __table_args__ = (Index("ix_sessions_user", "user_id"),)

    def __repr__(self) -> str:
        return f"<LoginSession user_id={self.user_id}>"


class Activity(Base):
    """A recorded sport session."""

    __tablename__ = "activities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    sport: Mapped[str] = mapped_column(String(255), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    intensity: Mapped[str] = mapped_column(String(64), default="moderate")
    notes: Mapped[str] = mapped_column(Text, default="")

    # Inline photo
    photo_data: Mapped[bytes | None] = mapped_column(LargeBinary)
    photo_media_type: Mapped[str | None] = mapped_column(String(128))

    is_public: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="activities")
    likes: Mapped[list["Like"]] = relationship(
        back_populates="activity", cascade="all, delete-orphan"
    )
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="activity", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_activity_duration_positive"),
        Index("ix_activities_owner_created", "owner_id", "created_at"),
        Index("ix_activities_public_created", "is_public", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Activity {self.sport} {self.date}>"


class Like(Base):
    """A user's like on an activity. At most one per (activity, user)."""

    __tablename__ = "likes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    activity: Mapped["Activity"] = relationship(back_populates="likes")
    user: Mapped["User"] = relationship(back_populates="likes")

    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_like_activity_user"),
    )

    def __repr__(self) -> str:
        return f"<Like activity_id={self.activity_id} user_id={self.user_id}>"


class Comment(Base):
    """A comment on an activity."""

    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    activity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    activity: Mapped["Activity"] = relationship(back_populates="comments")
    user: Mapped["User"] = relationship(back_populates="comments")

    __table_args__ = (Index("ix_comments_activity_created", "activity_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Comment {self.content[:30]}>"
