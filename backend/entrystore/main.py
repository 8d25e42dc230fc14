"""
entrystore - Application lifespan

Wires logging, the process-wide record store and the AuthService together.
A presentation layer enters ``lifespan()`` once and uses the yielded service
for every operation.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from entrystore.config import Settings, get_settings
from entrystore.core.logging import configure_logging
from entrystore.database.connections import close_store, get_record_store
from entrystore.services.auth_service import AuthService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(settings: Optional[Settings] = None) -> AsyncIterator[AuthService]:
    """
    Application lifespan manager.

    Startup:
    - Configure logging
    - Open (and upgrade) the record store

    Shutdown:
    - End the session
    - Close the record store
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting up entrystore...")
    store = await get_record_store(settings)
    auth_service = AuthService(store, settings)

    try:
        yield auth_service
    finally:
        logger.info("Shutting down entrystore...")
        auth_service.logout()
        await close_store()
