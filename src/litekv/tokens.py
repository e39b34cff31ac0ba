"""Random key generation for autonum()."""

from __future__ import annotations

import secrets as _secrets
import string as _string

import litekv.constants as constants

ALPHABET = _string.ascii_lowercase + _string.digits


def generate_token(length: int = constants.DEFAULT_AUTONUM_LENGTH) -> str:
    """Generate a random lowercase alphanumeric token."""
    if length < 1:
        raise ValueError(f"Token length must be positive, got {length}")
    return "".join(_secrets.choice(ALPHABET) for _ in range(length))
