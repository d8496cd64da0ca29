"""FastAPI application and routes.

This module provides the REST API for the sports tracker.

## API Structure

- /api/register, /api/login, /api/logout, /api/check-username - Accounts
- /api/user - Password change and account deletion
- /api/activities - Own activities and the public feed
- /api/activities/{id}/like, /likes, /comments - Engagement
- /api/comments/{id} - Comment deletion
- /api/weather - Current conditions at the nearest station
- /api/health - Liveness probe

## Authentication

Every endpoint except register, login, check-username and health requires an
`Authorization: Bearer <token>` header carrying a token issued by login.

## Envelope

Successful responses are `{"data": ...}` with camelCase keys; failures are
`{"error": "<message>"}`.
"""

from sports_tracker.api.app import create_app

__all__ = ["create_app"]
