"""Account management: registration, login and credential changes.

## Username rules

Usernames are trimmed before every lookup and compared exactly
(case-sensitive). The unique constraint on `users.username` is the final
arbiter when two registrations race.

## Uniform login failures

An unknown username and a wrong password produce the same
`UnauthenticatedError`, and both paths run one bcrypt comparison, so a
caller cannot probe which usernames exist.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
import secrets
import uuid
from functools import lru_cache

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sports_tracker.auth.passwords import hash_password, validate_new_password, verify_password
from sports_tracker.auth.session import SessionRegistry
from sports_tracker.database.connection import commit_or_raise
from sports_tracker.database.models import Activity, User
from sports_tracker.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password."

DEMO_USERNAME = "athlete"
DEMO_PASSWORD = "123456"
DEMO_DISPLAY_NAME = "Athlete Demo"


@lru_cache
def _dummy_hash() -> str:
    """Hash compared against when the username is unknown, to keep timing uniform."""
    return hash_password(secrets.token_urlsafe(16))


def normalize_username(username: str | None) -> str:
    """Trim a username; None becomes the empty string."""
    return "" if username is None else str(username).strip()


class AccountService:
    """Credential store operations.

    Example:
        ```python
        accounts = AccountService(db)
        user = await accounts.register("alice", "secret1")
        token, user = await accounts.login("alice", "secret1")
        ```
    """

    def __init__(self, db: AsyncSession, sessions: SessionRegistry | None = None):
        self.db = db
        self.sessions = sessions or SessionRegistry(db)

    async def _get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def _get_by_id(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    async def register(
        self,
        username: str | None,
        password: str | None,
        display_name: str | None = None,
    ) -> User:
        """Create a new account.

        Raises:
            ValidationError: Missing username/password or password too short
            ConflictError: Username already taken
        """
        if not username or not password:
            raise ValidationError("username and password are required fields.")

        username = normalize_username(username)
        if not username:
            raise ValidationError("username and password are required fields.")
        password = validate_new_password(password)

        if await self._get_by_username(username) is not None:
            raise ConflictError("Username already exists.")

        password_hash = await asyncio.to_thread(hash_password, password)
        user = User(
            username=username,
            password_hash=password_hash,
            display_name=(display_name or "").strip() or username,
        )
        self.db.add(user)

        try:
            await commit_or_raise(self.db, "register user")
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same name
            raise ConflictError("Username already exists.") from e

        logger.info(f"Registered user {user.username}")
        return user

    async def check_availability(self, username: str | None) -> bool:
        """Check whether a username is still free."""
        username = normalize_username(username)
        if not username:
            raise ValidationError("Username is required.")
        return await self._get_by_username(username) is None

    async def authenticate(self, username: str | None, password: str | None) -> User:
        """Verify credentials.

        Raises:
            ValidationError: Missing username or password
            UnauthenticatedError: Unknown username or wrong password (same message)
        """
        if not username or not password:
            raise ValidationError("username and password are required fields.")

        user = await self._get_by_username(normalize_username(username))
        password_hash = user.password_hash if user else await asyncio.to_thread(_dummy_hash)

        matches = await asyncio.to_thread(verify_password, str(password), password_hash)
        if user is None or not matches:
            raise UnauthenticatedError(INVALID_CREDENTIALS)

        return user

    async def login(self, username: str | None, password: str | None) -> tuple[str, User]:
        """Authenticate and open a new session.

        Returns:
            (session token, user)
        """
        user = await self.authenticate(username, password)
        token = await self.sessions.issue(user.id)
        logger.info(f"User {user.username} logged in")
        return token, user

    async def change_password(
        self,
        user_id: uuid.UUID,
        current_password: str | None,
        new_password: str | None,
    ) -> None:
        """Replace a user's password and sign them out everywhere.

        Raises:
            ValidationError: Missing fields or new password too short
            NotFoundError: User no longer exists
            UnauthenticatedError: Current password is wrong
        """
        if not current_password or not new_password:
            raise ValidationError("currentPassword and newPassword are required fields.")
        new_password = validate_new_password(new_password, label="New password")

        user = await self._get_by_id(user_id)
        if not await asyncio.to_thread(verify_password, str(current_password), user.password_hash):
            raise UnauthenticatedError("Current password is incorrect.")

        user.password_hash = await asyncio.to_thread(hash_password, new_password)
        await self.sessions.revoke_all(user.id, commit=False)
        await commit_or_raise(self.db, "update password")

        logger.info(f"Password changed for user {user.username}; all sessions revoked")

    async def delete_account(self, user_id: uuid.UUID, password: str | None) -> None:
        """Delete a user and everything they own or authored.

        Sessions, activities (with their likes and comments) and the user's
        own likes and comments on other activities are removed with the
        user row.

        Raises:
            ValidationError: Password missing
            NotFoundError: User no longer exists
            UnauthenticatedError: Password is wrong
        """
        if not password:
            raise ValidationError("Password is required to delete account.")

        user = await self._get_by_id(user_id)
        if not await asyncio.to_thread(verify_password, str(password), user.password_hash):
            raise UnauthenticatedError("Password is incorrect.")

        username = user.username
        await self.db.delete(user)
        await commit_or_raise(self.db, "delete account")

        logger.info(f"Deleted account {username}")

    async def seed_demo_account(self) -> User | None:
        """Create the demo account with one public sample activity.

        Returns:
            The new user, or None if the demo account already exists
        """
        if await self._get_by_username(DEMO_USERNAME) is not None:
            return None

        user = User(
            username=DEMO_USERNAME,
            password_hash=await asyncio.to_thread(hash_password, DEMO_PASSWORD),
            display_name=DEMO_DISPLAY_NAME,
        )
        self.db.add(user)
        await self.db.flush()

        self.db.add(
            Activity(
                owner_id=user.id,
                date=dt.date(2024, 1, 1),
                sport="Running",
                duration_minutes=30,
                intensity="moderate",
                notes="Sample record you can remove.",
                is_public=True,
            )
        )
        await commit_or_raise(self.db, "seed demo account")

        logger.info("Seed user and activity created")
        return user
