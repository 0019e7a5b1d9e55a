"""Identifier generation shared by every persisted entity."""

from __future__ import annotations

import secrets

# 16 random bytes -> 32 hex characters
_ID_BYTES = 16


def new_id() -> str:
    """Return an opaque random identifier."""
    return secrets.token_hex(_ID_BYTES)
