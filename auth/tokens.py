# auth/tokens.py
"""
Access token generation.

Tokens are 32 random bytes from the OS CSPRNG, hex encoded
(64 characters). A token is issued once per account and never rotated.
"""

from __future__ import annotations

import logging
import secrets

_logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
TOKEN_LENGTH = TOKEN_BYTES * 2


class RandomSourceUnavailableError(RuntimeError):
    """The secure random source cannot produce bytes."""
    pass


def generate_token() -> str:
    """Generate a new opaque access token."""
    try:
        return secrets.token_hex(TOKEN_BYTES)
    except NotImplementedError as e:
        # os.urandom raises this when no randomness source is found
        _logger.critical("Secure random source unavailable")
        raise RandomSourceUnavailableError("Secure random source unavailable") from e


def ensure_random_source() -> None:
    """
    Probe the random source once at startup.

    Raises:
        RandomSourceUnavailableError: If no token can be generated
    """
    token = generate_token()
    if len(token) != TOKEN_LENGTH:
        raise RandomSourceUnavailableError("Random source returned a short token")
