# auth/service.py
"""
Account service.

Handles:
- Registration (validate, hash, store)
- Login (lookup, verify, return the existing token)
- The message shown to an authenticated account
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from auth.models import Account, AuthResult
from auth.password import (
    DEFAULT_BCRYPT_ROUNDS,
    MIN_PASSWORD_LENGTH,
    hash_password,
    verify_password,
)
from auth.tokens import generate_token
from persistence.accounts import AccountStore, DuplicateNameError, StoreUnavailableError

_logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 5


class AuthError(Exception):
    """
    Base authentication error.

    Carries a short message for the client, an opaque detail string,
    and the HTTP status the outer layer answers with.
    """
    status_code = 400
    message = "Request failed"

    def __init__(self, detail: str = "", message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        self.detail = detail or self.message
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {"message": self.message, "error": self.detail}


class ValidationError(AuthError):
    """Name or password too short."""
    status_code = 400
    message = "Could not create user"


class RegistrationFailedError(AuthError):
    """Account could not be created."""
    status_code = 400
    message = "Could not create user"


class InvalidCredentialsError(AuthError):
    """Unknown name or wrong password; the two are not distinguished."""
    status_code = 404
    message = "User not found"


class UnauthorizedError(AuthError):
    """No account matches the presented token."""
    status_code = 401
    message = "Please try logging in again"


class ServiceUnavailableError(AuthError):
    """Account storage is unreachable."""
    status_code = 503
    message = "Service temporarily unavailable"


def _check_length(value: Any, field_name: str, minimum: int) -> None:
    if not isinstance(value, str) or len(value) < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum} characters")


class AccountService:
    """Registration and login on top of an AccountStore."""

    def __init__(self, store: AccountStore, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._store = store
        self._bcrypt_rounds = bcrypt_rounds
        self._dummy_hash: Optional[str] = None

    def _unknown_account_hash(self) -> str:
        """Hash checked for unknown names so both login failures cost one bcrypt run."""
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(generate_token(), rounds=self._bcrypt_rounds)
        return self._dummy_hash

    def register(self, name: str, password: str) -> AuthResult:
        """
        Register a new account.

        Args:
            name: Login name (at least 5 characters)
            password: Plain text password (at least 5 characters)

        Returns:
            AuthResult with the new id and access token

        Raises:
            ValidationError: If name or password is too short
            RegistrationFailedError: If the account could not be created
            ServiceUnavailableError: If storage is unreachable
        """
        _check_length(name, "name", MIN_NAME_LENGTH)
        _check_length(password, "password", MIN_PASSWORD_LENGTH)

        password_hash = hash_password(password, rounds=self._bcrypt_rounds)

        try:
            account = self._store.create_account(name, password_hash)
        except DuplicateNameError as e:
            _logger.info(f"Registration rejected for name: {name}")
            raise RegistrationFailedError("Account could not be created") from e
        except StoreUnavailableError as e:
            raise ServiceUnavailableError("Account storage unavailable") from e

        _logger.info(f"Registered account: {name} ({account.id})")
        return AuthResult.from_account(account)

    def login(self, name: str, password: str) -> AuthResult:
        """
        Log in with name and password.

        Returns the account's existing access token.

        Raises:
            InvalidCredentialsError: If the name is unknown or the password is wrong
            ServiceUnavailableError: If storage is unreachable
        """
        if not isinstance(name, str) or not isinstance(password, str):
            raise InvalidCredentialsError("Invalid name or password")

        try:
            account = self._store.find_by_name(name)
        except StoreUnavailableError as e:
            raise ServiceUnavailableError("Account storage unavailable") from e

        if account is None:
            verify_password(password, self._unknown_account_hash())
            _logger.warning(f"Login attempt for unknown account: {name}")
            raise InvalidCredentialsError("Invalid name or password")

        if not verify_password(password, account.password_hash):
            _logger.warning(f"Invalid password for account: {name}")
            raise InvalidCredentialsError("Invalid name or password")

        _logger.info(f"Account logged in: {name}")
        return AuthResult.from_account(account)


def who_am_i(account: Account) -> str:
    """Message for a protected endpoint, addressed to the account."""
    return f"{account.name} here you can update your profile details"
