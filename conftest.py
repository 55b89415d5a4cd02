"""Configure pytest for the token auth API."""
import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Test Environment Configuration
# =============================================================================
# Set environment for tests BEFORE any imports.
# Low bcrypt cost keeps hashing fast in tests.
TEST_BCRYPT_ROUNDS = 4
os.environ.setdefault("AUTH_ENVIRONMENT", "test")
os.environ.setdefault("AUTH_BCRYPT_ROUNDS", str(TEST_BCRYPT_ROUNDS))

# Add project root so tests can import auth, persistence and app
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def db(tmp_path):
    """A fresh, connected file-backed database per test."""
    from persistence.db import Database

    database = Database(tmp_path / "auth.db")
    database.connect()
    yield database
    database.close()


@pytest.fixture
def store(db):
    from persistence.accounts import AccountStore

    return AccountStore(db)


@pytest.fixture
def service(store):
    from auth.service import AccountService

    return AccountService(store, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def gate(store):
    from auth.middleware import AuthGate

    return AuthGate(store)
