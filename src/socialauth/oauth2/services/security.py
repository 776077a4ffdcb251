"""Security utilities for OAuth2 flows.

Provides cryptographically secure state generation and validation.
"""

from __future__ import annotations

import secrets

from socialauth.oauth2.models.errors import InvalidStateError

# 16 bytes / 128 bits, 32 characters once hex-encoded
STATE_BYTES = 16


def generate_state() -> str:
    """Generate cryptographically secure state parameter.

    The state parameter provides CSRF protection by ensuring the callback
    matches the original authorization request.

    Returns:
        Random state string (32 hex characters)
    """
    return secrets.token_hex(STATE_BYTES)


def validate_state(expected: str, actual: str) -> None:
    """Validate state parameter matches expected value.

    Args:
        expected: State parameter stored when the authorization URL was built
        actual: State parameter from the callback

    Raises:
        InvalidStateError: If state parameters don't match
    """
    if not secrets.compare_digest(expected.encode(), actual.encode()):
        raise InvalidStateError()
