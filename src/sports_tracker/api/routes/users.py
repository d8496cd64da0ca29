"""Account management routes for the signed-in user."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from pydantic import ConfigDict

from sports_tracker.api.routes import envelope
from sports_tracker.auth.accounts import AccountService
from sports_tracker.auth.dependencies import get_account_service, get_current_user_id
from sports_tracker.models.base import CamelModel

router = APIRouter()


class ChangePasswordRequest(CamelModel):
    """Password change body."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    current_password: str | None = None
    new_password: str | None = None


class DeleteAccountRequest(CamelModel):
    """Account deletion body; the password is re-confirmed."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    password: str | None = None


@router.put("/password")
async def change_password(
    body: ChangePasswordRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    """Change the password. Every session, including this one, is revoked."""
    await accounts.change_password(user_id, body.current_password, body.new_password)
    return envelope({"message": "Password updated successfully. Please log in again."})


@router.delete("")
async def delete_current_user(
    body: DeleteAccountRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    """Delete the current user's account.

    This permanently deletes the user, their sessions and activities, and
    every like and comment they made.
    """
    await accounts.delete_account(user_id, body.password)
    return envelope({"message": "Account deleted successfully."})
