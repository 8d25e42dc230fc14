"""
Database module - Embedded record store, schema and process-wide handle.
"""
from entrystore.database.collections import (
    DB_NAME,
    SCHEMA_VERSION,
    Collections,
    CollectionSchema,
    COLLECTION_SCHEMAS,
)
from entrystore.database.record_store import RecordStore
from entrystore.database.connections import get_record_store, close_store

__all__ = [
    "DB_NAME",
    "SCHEMA_VERSION",
    "Collections",
    "CollectionSchema",
    "COLLECTION_SCHEMAS",
    "RecordStore",
    "get_record_store",
    "close_store",
]
