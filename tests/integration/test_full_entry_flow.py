"""
Integration tests for the full register / login / entry flow.

Run with: pytest -m integration tests/integration/
"""
import asyncio

import pytest

from entrystore.core.errors import InvalidCredentials, UsernameTaken
from entrystore.database import connections
from entrystore.main import lifespan


pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


class TestFullEntryFlow:
    """End-to-end tests through the application lifespan."""

    async def test_scenario(self, app_service):
        """Register, log in, add, list, update, delete."""
        await app_service.register("alice", "1234")

        with pytest.raises(InvalidCredentials):
            await app_service.login("alice", "wrong")

        identity = await app_service.login("alice", "1234")
        assert identity == "alice"

        entry = await app_service.add_entry(identity, "N", "Addr", "Lic")
        assert entry.id == 1

        listed = await app_service.list_owned_entries(identity)
        assert [(e.id, e.name, e.address, e.license) for e in listed] == [
            (1, "N", "Addr", "Lic")
        ]

        await app_service.update_entry(identity, 1, "N2", "Addr", "Lic")
        listed = await app_service.list_owned_entries(identity)
        assert [e.name for e in listed] == ["N2"]

        await app_service.delete_entry(identity, 1)
        assert await app_service.list_owned_entries(identity) == []

    async def test_register_twice(self, app_service):
        await app_service.register("alice", "1234")

        with pytest.raises(UsernameTaken):
            await app_service.register("alice", "1234")

    async def test_overlapping_operations(self, app_service):
        """A listing and a delete in flight together each complete once."""
        await app_service.register("alice", "1234")
        first = await app_service.add_entry("alice", "N1", "A", "L")
        await app_service.add_entry("alice", "N2", "A", "L")

        listing, deleted = await asyncio.gather(
            app_service.list_owned_entries("alice"),
            app_service.delete_entry("alice", first.id),
        )

        assert deleted is None
        assert len(listing) in (1, 2)
        remaining = await app_service.list_owned_entries("alice")
        assert [e.name for e in remaining] == ["N2"]

    async def test_lifespan_closes_store(self, test_settings):
        async with lifespan(test_settings) as service:
            assert service.store.is_open

        assert connections._record_store is None
        assert not service.store.is_open
        assert service.session is None

    async def test_data_and_session_survive_restart(self, test_settings):
        async with lifespan(test_settings) as service:
            await service.register("alice", "1234")
            await service.login("alice", "1234")
            await service.add_entry("alice", "N", "Addr", "Lic")
            token = service.session.token

        async with lifespan(test_settings) as service:
            assert await service.restore_session(token) == "alice"
            entries = await service.list_owned_entries(service.current_user)
            assert [e.name for e in entries] == ["N"]
            assert await service.login("alice", "1234") == "alice"
