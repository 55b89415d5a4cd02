# auth/middleware.py
"""
FastAPI authentication gate.

Resolves the token in the Authorization header to an account. A missing,
malformed, or unknown token is rejected the same way.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request

from auth.models import Account
from auth.service import ServiceUnavailableError, UnauthorizedError
from persistence.accounts import AccountStore, StoreUnavailableError

_logger = logging.getLogger(__name__)

AUTH_HEADER = "Authorization"
BEARER_PREFIX = "bearer "


def extract_token(header_value: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    Accepts the bare token or "Bearer <token>". Absence yields "".
    """
    if not header_value:
        return ""
    value = header_value.strip()
    if value.lower().startswith(BEARER_PREFIX):
        value = value[len(BEARER_PREFIX):].strip()
    return value


class AuthGate:
    """Guard for protected endpoints."""

    def __init__(self, store: AccountStore) -> None:
        self._store = store

    def authenticate(self, token: str) -> Account:
        """
        Resolve a token to its account.

        Raises:
            UnauthorizedError: If no account holds this token
            ServiceUnavailableError: If storage is unreachable
        """
        try:
            account = self._store.find_by_token(token)
        except StoreUnavailableError as e:
            raise ServiceUnavailableError("Account storage unavailable") from e

        if account is None:
            _logger.info("Rejected request with unknown access token")
            raise UnauthorizedError("User not found")

        return account


def require_account(request: Request) -> Account:
    """
    FastAPI dependency: the authenticated account (required).

    Attaches the account to request.state.account. Raises
    UnauthorizedError, which stops the request before the handler runs.
    """
    gate: AuthGate = request.app.state.auth_gate
    token = extract_token(request.headers.get(AUTH_HEADER))
    account = gate.authenticate(token)
    request.state.account = account
    return account
