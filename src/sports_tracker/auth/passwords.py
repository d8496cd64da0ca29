"""Password hashing with bcrypt.

Plaintext passwords only ever live in memory for the duration of a hash or
verify call. bcrypt truncates (or, in recent releases, rejects) input beyond
72 bytes, so longer passwords are refused at validation time.
"""

from __future__ import annotations

import bcrypt

from sports_tracker.config import get_settings
from sports_tracker.exceptions import ValidationError

BCRYPT_MAX_BYTES = 72


def validate_new_password(password: str | None, label: str = "Password") -> str:
    """Check a password chosen by the user.

    Args:
        password: Candidate password
        label: Field name used in the error message

    Returns:
        The password, unchanged

    Raises:
        ValidationError: If the password is too short or too long
    """
    settings = get_settings()

    password = "" if password is None else str(password)
    if len(password) < settings.password_min_length:
        raise ValidationError(
            f"{label} must be at least {settings.password_min_length} characters long."
        )
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"{label} must be at most {BCRYPT_MAX_BYTES} bytes long.")
    return password


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt."""
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a stored hash."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
