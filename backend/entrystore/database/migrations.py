"""
Schema versioning for the SQLite-backed entry store.

The schema version lives in SQLite's ``user_version`` header field. An
upgrade creates every collection that belongs to the target version and is
not yet present; existing tables and their rows are never touched. The
caller runs ``upgrade`` inside a transaction so a failed upgrade leaves the
file as it was.
"""
import sqlite3

from entrystore.core.errors import StoreUnavailable
from entrystore.database.collections import (
    COLLECTION_SCHEMAS,
    SCHEMA_VERSION,
    CollectionSchema,
)


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the schema version stored in the database header."""
    return conn.execute("PRAGMA user_version").fetchone()[0]


def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Write the schema version (PRAGMA does not accept bound parameters)."""
    conn.execute(f"PRAGMA user_version = {int(version)}")


def existing_collections(conn: sqlite3.Connection) -> set[str]:
    """Names of the tables already present."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table'"
    ).fetchall()
    return {row[0] for row in rows}


def collection_ddl(schema: CollectionSchema) -> str:
    """CREATE TABLE statement for a collection."""
    if schema.auto_increment:
        # AUTOINCREMENT keeps ids strictly increasing and never reuses them
        key_column = f"{schema.key_path} INTEGER PRIMARY KEY AUTOINCREMENT"
    else:
        key_column = f"{schema.key_path} TEXT PRIMARY KEY NOT NULL"
    return (
        f"CREATE TABLE IF NOT EXISTS {schema.name} ("
        f"{key_column}, "
        f"document TEXT NOT NULL)"
    )


def upgrade(conn: sqlite3.Connection, target: int = SCHEMA_VERSION) -> list[str]:
    """
    Bring the database up to ``target``.

    Returns:
        Names of the collections created, empty when already current

    Raises:
        StoreUnavailable: If the file was written by a newer schema
    """
    current = get_schema_version(conn)

    if current > target:
        raise StoreUnavailable(
            f"Database schema version {current} is newer than supported version {target}"
        )
    if current == target:
        return []

    present = existing_collections(conn)
    created = []
    for schema in COLLECTION_SCHEMAS.values():
        if schema.since_version <= target and schema.name not in present:
            conn.execute(collection_ddl(schema))
            created.append(schema.name)

    set_schema_version(conn, target)
    return created
