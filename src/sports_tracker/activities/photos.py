"""Photo upload checks.

Photos are kept inline with the activity. Before acceptance an upload must
declare an `image/*` media type and fit under the configured ceiling
(5 MB by default).
"""

from __future__ import annotations

from sports_tracker.config import get_settings
from sports_tracker.exceptions import PayloadTooLargeError, ValidationError
from sports_tracker.models.activity import Photo

IMAGE_MEDIA_PREFIX = "image/"


def validate_photo(media_type: str | None, data: bytes) -> Photo | None:
    """Validate an uploaded photo.

    Args:
        media_type: Declared content type of the upload
        data: Raw bytes

    Returns:
        The accepted Photo, or None for an empty upload

    Raises:
        PayloadTooLargeError: If the photo exceeds the size ceiling
        ValidationError: If the media type is not an image type
    """
    if not data:
        return None

    max_bytes = get_settings().photo_max_bytes
    if len(data) > max_bytes:
        raise PayloadTooLargeError(
            f"Photo must be smaller than {max_bytes // (1024 * 1024)} MB."
        )

    media_type = (media_type or "").strip().lower()
    if not media_type.startswith(IMAGE_MEDIA_PREFIX):
        raise ValidationError("Only image uploads are allowed.")

    return Photo(media_type=media_type, data=data)
