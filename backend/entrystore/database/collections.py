"""
Database configuration.
Names the collections of the entry store and how each one is keyed.
"""
from dataclasses import dataclass

DB_NAME = "entrystore"

# Bump when a collection is added; the upgrade creates whatever is missing.
SCHEMA_VERSION = 2


class Collections:
    """Collection names in the entry store."""
    USERS = "users"
    ENTRIES = "entries"


@dataclass(frozen=True)
class CollectionSchema:
    """How a collection is keyed and what a put on an existing key does."""
    name: str
    key_path: str
    auto_increment: bool = False
    overwrite: bool = False
    since_version: int = 1


COLLECTION_SCHEMAS: dict[str, CollectionSchema] = {
    Collections.ENTRIES: CollectionSchema(
        name=Collections.ENTRIES,
        key_path="id",
        auto_increment=True,
        overwrite=True,
        since_version=1,
    ),
    Collections.USERS: CollectionSchema(
        name=Collections.USERS,
        key_path="username",
        since_version=2,
    ),
}


# Manifest describing the store, mirrored into logs on open
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Credentials and owner-scoped data entries for one local client",
    "collections": list(COLLECTION_SCHEMAS),
    "schema_version": SCHEMA_VERSION,
}
