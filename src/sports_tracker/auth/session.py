"""Session management using store-backed bearer tokens.

A session token is an opaque, unguessable string handed to the client at
login and sent back as `Authorization: Bearer <token>`. The token itself
carries no data: it is valid exactly as long as its row exists in the
`sessions` table.

## Lifecycle

- Created by a successful login (`SessionRegistry.issue`)
- Resolved on every protected request (`SessionRegistry.resolve`)
- Deleted on logout (`revoke`), on password change and on account
  deletion (`revoke_all`)

Sessions do not expire on their own.

## Security

- Tokens come from `secrets.token_urlsafe`, 32 bytes of entropy
- Tokens are never logged
"""

from __future__ import annotations

import logging
import secrets
import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sports_tracker.database.connection import commit_or_raise
from sports_tracker.database.models import LoginSession
from sports_tracker.exceptions import PersistenceError, UnauthenticatedError

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def generate_token() -> str:
    """Generate a new random session token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


class SessionRegistry:
    """Issues, resolves and revokes session tokens.

    Example:
        ```python
        registry = SessionRegistry(db)
        token = await registry.issue(user.id)
        user_id = await registry.resolve(token)
        await registry.revoke_all(user_id)
        ```
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def issue(self, user_id: uuid.UUID) -> str:
        """Create and persist a session for a user.

        Raises:
            PersistenceError: If the session row could not be written
        """
        token = generate_token()
        self.db.add(LoginSession(token=token, user_id=user_id))
        try:
            await commit_or_raise(self.db, "create session")
        except SQLAlchemyError as e:
            # Integrity errors pass through commit_or_raise unchanged
            raise PersistenceError("Could not create session.") from e

        logger.info(f"Session issued for user {user_id}")
        return token

    async def resolve(self, token: str | None) -> uuid.UUID:
        """Look up the user a token belongs to.

        Raises:
            UnauthenticatedError: If the token is missing or unknown
        """
        if not token:
            raise UnauthenticatedError()

        result = await self.db.execute(
            select(LoginSession.user_id).where(LoginSession.token == token)
        )
        user_id = result.scalar_one_or_none()

        if user_id is None:
            logger.debug("Rejected unknown session token")
            raise UnauthenticatedError()

        return user_id

    async def revoke(self, token: str) -> None:
        """Delete a single session. Unknown tokens are ignored."""
        await self.db.execute(delete(LoginSession).where(LoginSession.token == token))
        await commit_or_raise(self.db, "end session")

    async def revoke_all(self, user_id: uuid.UUID, commit: bool = True) -> int:
        """Delete every session of a user.

        Args:
            user_id: Owner of the sessions
            commit: Commit immediately; pass False to join a larger transaction

        Returns:
            Number of sessions removed (0 is not an error)
        """
        result = await self.db.execute(
            delete(LoginSession).where(LoginSession.user_id == user_id)
        )
        if commit:
            await commit_or_raise(self.db, "revoke sessions")

        revoked = result.rowcount or 0
        logger.info(f"Revoked {revoked} session(s) for user {user_id}")
        return revoked
