# auth/models.py
"""
Account models for authentication.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Account:
    """
    Registered account.

    Attributes:
        id: Unique account ID (UUID), assigned at creation
        name: Login name chosen by the user (unique, immutable)
        password_hash: Bcrypt hash of the password
        access_token: Bearer token issued at creation (unique, never rotated)
        created_at: Account creation timestamp
    """
    id: str
    name: str
    password_hash: str = field(repr=False)
    access_token: str = field(repr=False)
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def new(cls, name: str, password_hash: str, access_token: str) -> Account:
        """Create a new account with generated ID."""
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            password_hash=password_hash,
            access_token=access_token,
            created_at=_utcnow(),
        )

    def to_dict(self) -> dict:
        """Public view (no password hash, no token)."""
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class AuthResult:
    """What register and login hand back to the caller."""
    id: str
    access_token: str
    name: str

    @classmethod
    def from_account(cls, account: Account) -> AuthResult:
        return cls(id=account.id, access_token=account.access_token, name=account.name)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "accessToken": self.access_token,
            "name": self.name,
        }
