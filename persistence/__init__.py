# persistence/__init__.py
"""
Persistence layer.

Provides SQLite-backed storage for:
- Accounts (name, password hash, access token)
"""

from persistence.db import Database
from persistence.accounts import (
    AccountStore,
    StoreError,
    DuplicateNameError,
    StoreUnavailableError,
)

__all__ = [
    "Database",
    "AccountStore",
    "StoreError",
    "DuplicateNameError",
    "StoreUnavailableError",
]
