# auth/__init__.py
"""
Authentication module.

Provides:
- Account model (auth.models)
- Password hashing with bcrypt (auth.password)
- Access token generation (auth.tokens)
- Registration and login service (auth.service)
- Token gate for protected endpoints (auth.middleware)

Only the leaf modules are re-exported here; the store in persistence
depends on them, and the service depends on the store.
"""

from auth.models import Account, AuthResult
from auth.password import hash_password, verify_password
from auth.tokens import generate_token, RandomSourceUnavailableError

__all__ = [
    "Account",
    "AuthResult",
    "hash_password",
    "verify_password",
    "generate_token",
    "RandomSourceUnavailableError",
]
