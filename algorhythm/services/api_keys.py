"""API key helpers.

Security:
- Raw API keys are only returned once at registration/rotation
- Only SHA-256 hex digests are stored in the database
- Keys use secure random generation (secrets module)
- Never log or expose raw keys after creation
"""

from __future__ import annotations

import hashlib
import secrets

# 32 random bytes -> 64 hex characters
_KEY_BYTES = 32


class InvalidAPIKeyError(Exception):
    """Raised when a supplied API key does not match the agent's stored hash."""

    pass


def generate_api_key() -> str:
    """Return a new raw API key."""
    return secrets.token_hex(_KEY_BYTES)


def hash_api_key(raw_key: str) -> str:
    """Return the SHA-256 hex digest stored in place of a raw key."""
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()
