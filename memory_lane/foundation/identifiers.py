"""ID and invite-code generation."""

from __future__ import annotations

import secrets
from uuid import uuid4

# Excludes the look-alikes 0/O and 1/I.
INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_LENGTH = 6


def new_id() -> str:
    """Generate a new opaque identifier for stored documents."""
    return uuid4().hex


def new_invite_code() -> str:
    """Generate a random partner invite code."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))
