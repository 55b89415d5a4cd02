# persistence/accounts.py
"""
Account storage.

The accounts table carries UNIQUE constraints on name and access_token,
so the uniqueness check and the insert are one atomic statement. The
store takes inputs as given: hashing and validation happen before it
is called.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Callable, Optional

from auth.models import Account
from auth.tokens import generate_token
from persistence.db import Database

_logger = logging.getLogger(__name__)

# Retries when a freshly generated token collides with an existing one
MAX_TOKEN_ATTEMPTS = 3


class StoreError(Exception):
    """Base storage error."""
    pass


class DuplicateNameError(StoreError):
    """An account with this name already exists."""
    pass


class StoreUnavailableError(StoreError):
    """The backing database could not be read or written."""
    pass


def _violated_column(error: sqlite3.IntegrityError) -> str:
    """Column named in a 'UNIQUE constraint failed: accounts.<col>' message."""
    message = str(error)
    if "accounts." not in message:
        return ""
    return message.rsplit("accounts.", 1)[1].strip()


class AccountStore:
    """
    SQLite-backed account store.

    Owns Account records; callers only ever see the values it returns.
    """

    def __init__(
        self,
        db: Database,
        token_factory: Callable[[], str] = generate_token,
    ) -> None:
        self._db = db
        self._token_factory = token_factory

    @staticmethod
    def _row_to_account(row: sqlite3.Row) -> Account:
        return Account(
            id=row["id"],
            name=row["name"],
            password_hash=row["password_hash"],
            access_token=row["access_token"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _insert(self, account: Account) -> None:
        with self._db.connection() as conn:
            conn.execute(
                """
                INSERT INTO accounts (id, name, password_hash, access_token, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    account.id,
                    account.name,
                    account.password_hash,
                    account.access_token,
                    account.created_at.isoformat(),
                ),
            )

    def create_account(self, name: str, password_hash: str) -> Account:
        """
        Create and persist a new account.

        Args:
            name: Unique login name
            password_hash: Already-hashed password

        Returns:
            The stored Account, with its new id and access token

        Raises:
            DuplicateNameError: If name is taken
            StoreUnavailableError: If the database fails
        """
        for _ in range(MAX_TOKEN_ATTEMPTS):
            account = Account.new(
                name=name,
                password_hash=password_hash,
                access_token=self._token_factory(),
            )
            try:
                self._insert(account)
            except sqlite3.IntegrityError as e:
                column = _violated_column(e)
                if column == "name":
                    raise DuplicateNameError(f"Account name already exists: {name}") from e
                if column in ("access_token", "id"):
                    _logger.warning("Generated account key collided; retrying")
                    continue
                raise StoreUnavailableError(f"Could not store account: {e}") from e
            except sqlite3.Error as e:
                _logger.error(f"Account insert failed: {e}")
                raise StoreUnavailableError(f"Could not store account: {e}") from e

            _logger.info(f"Created account: {name} ({account.id})")
            return account

        raise StoreUnavailableError("Could not generate a unique access token")

    def _find_one(self, column: str, value: str) -> Optional[Account]:
        try:
            with self._db.connection() as conn:
                row = conn.execute(
                    f"SELECT * FROM accounts WHERE {column} = ?",
                    (value,),
                ).fetchone()
        except sqlite3.Error as e:
            _logger.error(f"Account lookup by {column} failed: {e}")
            raise StoreUnavailableError(f"Could not read accounts: {e}") from e

        if row is None:
            return None
        return self._row_to_account(row)

    def find_by_name(self, name: str) -> Optional[Account]:
        """Get account by name, or None."""
        if not name:
            return None
        return self._find_one("name", name)

    def find_by_token(self, token: str) -> Optional[Account]:
        """Get account by access token, or None."""
        if not token:
            return None
        return self._find_one("access_token", token)

    def find_by_id(self, account_id: str) -> Optional[Account]:
        """Get account by ID, or None."""
        if not account_id:
            return None
        return self._find_one("id", account_id)

    def count(self) -> int:
        """Number of stored accounts."""
        try:
            with self._db.connection() as conn:
                row = conn.execute("SELECT COUNT(*) AS n FROM accounts").fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Could not read accounts: {e}") from e
        return row["n"]
