"""FastAPI dependencies for authentication.

These dependencies resolve the caller from the `Authorization: Bearer <token>`
header before a protected route body runs. The resolved user id is passed
explicitly into every service call.

## Usage

```python
from fastapi import Depends
from sports_tracker.auth import get_current_user_id

@router.get("/activities")
async def list_activities(user_id: uuid.UUID = Depends(get_current_user_id)):
    ...
```
"""

from __future__ import annotations

import logging
import uuid

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from sports_tracker.auth.accounts import AccountService
from sports_tracker.auth.session import SessionRegistry
from sports_tracker.database.connection import get_db_session

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def parse_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


async def get_session_registry(
    db: AsyncSession = Depends(get_db_session),
) -> SessionRegistry:
    return SessionRegistry(db)


async def get_account_service(
    db: AsyncSession = Depends(get_db_session),
) -> AccountService:
    return AccountService(db)


async def get_bearer_token(
    authorization: str | None = Header(default=None),
) -> str | None:
    return parse_bearer_token(authorization)


async def get_current_user_id(
    token: str | None = Depends(get_bearer_token),
    registry: SessionRegistry = Depends(get_session_registry),
) -> uuid.UUID:
    """Resolve the authenticated user's id.

    Raises UnauthenticatedError (401) when the header is missing, malformed
    or carries an unknown token.
    """
    return await registry.resolve(token)
