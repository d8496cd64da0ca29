"""Error taxonomy shared by every component.

Each error carries the HTTP status it maps to, so the API layer can render
all of them through a single handler:

| Error | Status |
|-------|--------|
| ValidationError | 400 |
| PayloadTooLargeError | 400 |
| DuplicateLikeError | 400 |
| UnauthenticatedError | 401 |
| ForbiddenError | 403 |
| NotFoundError | 404 |
| ConflictError | 409 |
| PersistenceError | 500 |
| UpstreamError | 500 |

Server-side errors (status >= 500) are logged and replaced with a generic
message before reaching the client.
"""

from __future__ import annotations


class SportsTrackerError(Exception):
    """Base exception for all service errors."""

    status_code: int = 500
    default_message: str = "Unexpected server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SportsTrackerError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid request."


class PayloadTooLargeError(SportsTrackerError):
    """Uploaded payload exceeds the accepted size."""

    status_code = 400
    default_message = "Payload too large."


class ConflictError(SportsTrackerError):
    """Uniqueness violation (e.g. username already taken)."""

    status_code = 409
    default_message = "Resource already exists."


class DuplicateLikeError(ConflictError):
    """The caller already liked this activity."""

    status_code = 400
    default_message = "Already liked this activity."


class UnauthenticatedError(SportsTrackerError):
    """Missing or invalid credentials or session token."""

    status_code = 401
    default_message = "Unauthorized."


class ForbiddenError(SportsTrackerError):
    """Authenticated, but not entitled to the resource."""

    status_code = 403
    default_message = "Access denied."


class NotFoundError(SportsTrackerError):
    """Resource absent (or, for activities, absent or not owned)."""

    status_code = 404
    default_message = "Not found."


class PersistenceError(SportsTrackerError):
    """The store could not complete a read or write."""

    status_code = 500
    default_message = "Could not save changes."


class UpstreamError(SportsTrackerError):
    """An external collaborator failed."""

    status_code = 500
    default_message = "Upstream service failed."
