"""Security primitives for the Duo handshake.

Provides cryptographically secure random identifiers (used for ``state`` and
``jti`` values) and the wall clock in whole seconds for JWT time claims.
"""

from __future__ import annotations

import secrets
import time


def generate_random_string(length: int) -> str:
    """Generate a cryptographically secure random hex string.

    Args:
        length: Number of hex characters to return

    Returns:
        Random lowercase hex string of exactly ``length`` characters
    """
    return secrets.token_hex((length + 1) // 2)[:length]


def get_time_in_seconds() -> int:
    """Current Unix time rounded to the nearest second."""
    return round(time.time())
