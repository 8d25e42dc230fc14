"""
Global test fixtures for entrystore.

This module provides shared fixtures for all tests including:
- Settings pointing at a temporary database file
- An opened RecordStore per test
- An AuthService wired to that store
- Registered test users
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def db_path(tmp_path) -> Path:
    """Path of the SQLite file used by a test."""
    return tmp_path / "data" / "entrystore.db"


@pytest.fixture
def test_settings(db_path):
    """Settings isolated from the environment and the user's home directory."""
    from entrystore.config import Settings

    return Settings(
        database_path=str(db_path),
        database_timeout_seconds=0.1,
        session_secret_key="test-secret-key",
        _env_file=None,
    )


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def record_store(test_settings):
    """Opened RecordStore on a fresh database file."""
    from entrystore.database.record_store import RecordStore

    store = RecordStore(settings=test_settings)
    await store.open()
    yield store
    await store.close()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def auth_service(record_store, test_settings):
    """AuthService backed by the per-test store."""
    from entrystore.services.auth_service import AuthService

    return AuthService(record_store, test_settings)


@pytest.fixture
def alice_credentials() -> dict:
    return {"username": "alice", "password": "1234"}


@pytest.fixture
def bob_credentials() -> dict:
    return {"username": "bob", "password": "hunter22"}


@pytest_asyncio.fixture
async def registered_users(auth_service, alice_credentials, bob_credentials):
    """Register alice and bob; returns their usernames."""
    await auth_service.register(**alice_credentials)
    await auth_service.register(**bob_credentials)
    return alice_credentials["username"], bob_credentials["username"]


@pytest.fixture
def entry_content() -> dict:
    """Content fields of a sample entry."""
    return {
        "name": "N",
        "address": "Addr",
        "license": "Lic",
    }
