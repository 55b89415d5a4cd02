# auth/password.py
"""
Password hashing using bcrypt.

Every hash carries its own random salt, so hashing the same password
twice gives two different strings. Verification re-derives the salt
from the stored hash.
"""

from __future__ import annotations

import logging

import bcrypt

_logger = logging.getLogger(__name__)

# Work factor (cost). app.config reads AUTH_BCRYPT_ROUNDS into this range.
DEFAULT_BCRYPT_ROUNDS = 12
MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 31

MIN_PASSWORD_LENGTH = 5

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _to_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost

    Returns:
        Bcrypt hash string (includes salt)
    """
    if not password:
        raise ValueError("Password cannot be empty")

    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_to_bytes(password), salt)

    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its hash.

    Comparison is constant-time inside bcrypt.checkpw.

    Returns:
        True if password matches, False otherwise
    """
    if not password or not password_hash:
        return False

    try:
        return bcrypt.checkpw(_to_bytes(password), password_hash.encode("utf-8"))
    except ValueError as e:
        _logger.warning(f"Stored password hash could not be checked: {e}")
        return False
