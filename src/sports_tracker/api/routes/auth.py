"""Authentication routes.

Handles registration, username availability, login and logout.

## Flow

1. POST /api/register - Create an account (does not log in)
2. POST /api/login - Exchange username/password for a bearer token
3. POST /api/logout - Revoke the presented token
4. GET /api/check-username - Check whether a username is free

## Session Management

Tokens are opaque strings stored server-side in the `sessions` table and sent
back by clients as `Authorization: Bearer <token>`.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, status
from pydantic import ConfigDict

from sports_tracker.api.routes import envelope
from sports_tracker.auth.accounts import AccountService
from sports_tracker.auth.dependencies import (
    get_account_service,
    get_bearer_token,
    get_current_user_id,
    get_session_registry,
)
from sports_tracker.auth.session import SessionRegistry
from sports_tracker.models.base import CamelModel
from sports_tracker.models.user import UserView

logger = logging.getLogger(__name__)

router = APIRouter()


class CredentialsRequest(CamelModel):
    """Login body. Fields are optional so missing ones get a 400 with a clear message."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    username: str | None = None
    password: str | None = None


class RegisterRequest(CredentialsRequest):
    """Registration body."""

    display_name: str | None = None


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    """Create an account. The caller must log in afterwards."""
    user = await accounts.register(body.username, body.password, body.display_name)
    return envelope(
        {
            "user": UserView.from_record(user),
            "message": "Registration successful. Please log in.",
        }
    )


@router.get("/check-username")
async def check_username(
    username: str | None = None,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    """Report whether a (trimmed) username is still available."""
    available = await accounts.check_availability(username)
    return envelope({"username": (username or "").strip(), "available": available})


@router.post("/login")
async def login(
    body: CredentialsRequest,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    """Authenticate and issue a new session token."""
    token, user = await accounts.login(body.username, body.password)
    return envelope({"token": token, "user": UserView.from_record(user)})


@router.post("/logout")
async def logout(
    user_id: uuid.UUID = Depends(get_current_user_id),
    token: str | None = Depends(get_bearer_token),
    registry: SessionRegistry = Depends(get_session_registry),
) -> dict:
    """Revoke the token this request was made with. Other sessions stay valid."""
    await registry.revoke(token)
    logger.info(f"User {user_id} logged out")
    return envelope({"message": "Logged out."})
