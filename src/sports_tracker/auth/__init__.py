"""Authentication module for the sports tracker.

Provides password-based accounts and store-backed session tokens.

## Login Flow

1. Client posts username/password to /api/login
2. Credentials are verified against the bcrypt hash
3. A random session token is stored and returned
4. Client sends `Authorization: Bearer <token>` on every protected request

## Security

- Passwords are hashed with bcrypt and never logged
- Tokens are random, opaque, and valid until revoked
- Changing the password revokes every session of the user
"""

from sports_tracker.auth.accounts import AccountService
from sports_tracker.auth.passwords import hash_password, verify_password
from sports_tracker.auth.session import SessionRegistry, generate_token
from sports_tracker.auth.dependencies import (
    get_account_service,
    get_bearer_token,
    get_current_user_id,
    get_session_registry,
    parse_bearer_token,
)

__all__ = [
    "AccountService",
    "hash_password",
    "verify_password",
    "SessionRegistry",
    "generate_token",
    "get_account_service",
    "get_bearer_token",
    "get_current_user_id",
    "get_session_registry",
    "parse_bearer_token",
]
