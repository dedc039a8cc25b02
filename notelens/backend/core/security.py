"""
Security Utilities.

Caller identity and password hashing.

Identity is trust-on-header: the literal value of the x-user-id header
becomes the owner key for every store operation. There is no signature or
session validation. Swapping in real authentication only changes how a
Principal is produced; the store and services receive a Principal either way.
"""

from dataclasses import dataclass

import bcrypt

from notelens.backend.core.exceptions import AuthenticationError
from notelens.backend.core.logging import get_logger

logger = get_logger(__name__)

USER_ID_HEADER = "x-user-id"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller. `user_id` is the owner key for stored records."""

    user_id: str


def principal_from_header(value: str | None) -> Principal:
    """
    Build a Principal from the raw x-user-id header value.

    Raises:
        AuthenticationError: If the header is missing or blank
    """
    if value is None or not value.strip():
        raise AuthenticationError("Authentication required")
    return Principal(user_id=value.strip())


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")
