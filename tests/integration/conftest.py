"""
Integration test fixtures.

These tests run the full application lifespan against a database file in a
temporary directory. Mark with @pytest.mark.integration.
"""
import pytest_asyncio


@pytest_asyncio.fixture
async def app_service(test_settings):
    """AuthService yielded by the application lifespan."""
    from entrystore.main import lifespan

    async with lifespan(test_settings) as service:
        yield service
