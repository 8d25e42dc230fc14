"""
Process-wide record store handle.
"""
from typing import Optional

from entrystore.config import Settings, get_settings
from entrystore.database.record_store import RecordStore

# Global store instance
_record_store: Optional[RecordStore] = None


async def get_record_store(settings: Optional[Settings] = None) -> RecordStore:
    """Get or create the opened record store."""
    global _record_store
    if _record_store is None:
        settings = settings or get_settings()
        _record_store = RecordStore(settings=settings)
    return await _record_store.open()


async def close_store() -> None:
    """Close the record store."""
    global _record_store

    if _record_store is not None:
        await _record_store.close()
        _record_store = None
