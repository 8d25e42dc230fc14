"""
Embedded transactional record store.

Each collection is an SQLite table holding ``(key, document)`` rows, where
the document is the JSON-encoded record without its key. Every write runs in
its own transaction, so a record is either fully stored or not at all.
"""
import asyncio
import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from entrystore.config import Settings, get_settings
from entrystore.core.errors import (
    DuplicateKey,
    StoreUnavailable,
    TransactionFailed,
    UnknownCollection,
)
from entrystore.database import migrations
from entrystore.database.collections import COLLECTION_SCHEMAS, DB_MANIFEST, CollectionSchema

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements in one write transaction."""
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
        conn.execute("COMMIT")
    except BaseException:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise


SQLITE_INTEGER_MIN = -(2 ** 63)
SQLITE_INTEGER_MAX = 2 ** 63 - 1


def _encode(record: dict[str, Any], key_path: str) -> str:
    document = {k: v for k, v in record.items() if k != key_path}
    # ASCII escapes keep lone surrogates intact through the UTF-8 column
    return json.dumps(document)


def _is_bindable(key: Any) -> bool:
    """Whether SQLite can bind ``key``; any other key cannot be stored."""
    if isinstance(key, int):
        return SQLITE_INTEGER_MIN <= key <= SQLITE_INTEGER_MAX
    if isinstance(key, str):
        try:
            key.encode("utf-8")
        except UnicodeEncodeError:
            return False
    return True


def _decode(key: Any, document: str, key_path: str) -> dict[str, Any]:
    record = json.loads(document)
    record[key_path] = key
    return record


class RecordStore:
    """
    Async CRUD over the collections named in ``COLLECTION_SCHEMAS``.

    Blocking SQLite calls run in a worker thread; an ``asyncio.Lock`` makes
    sure only one of them touches the connection at a time.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            path: SQLite file, or ":memory:"; defaults to settings.database_path
            timeout: Seconds to wait for a locked database before failing
            settings: Optional settings overriding the cached ones
        """
        settings = settings or get_settings()
        self.path = path if path is not None else settings.database_path
        self.timeout = timeout if timeout is not None else settings.database_timeout_seconds
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    # ==================== Lifecycle ====================

    async def open(self) -> "RecordStore":
        """
        Open the database, creating and upgrading it if needed.

        Safe to call repeatedly; only the first call touches the file.

        Raises:
            StoreUnavailable: If the database cannot be opened
        """
        await self._run(lambda conn: None)
        return self

    async def close(self) -> None:
        """Close the connection. A later operation opens it again."""
        async with self._lock:
            if self._conn is not None:
                conn, self._conn = self._conn, None
                await asyncio.to_thread(conn.close)
                logger.info(f"Closed {DB_MANIFEST['db_name']} at {self.path}")

    def _resolve_path(self) -> str:
        if self.path == MEMORY_PATH:
            return self.path
        path = Path(self.path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)

    def _connect(self) -> sqlite3.Connection:
        try:
            path = self._resolve_path()
            # Autocommit mode: transactions are opened explicitly
            conn = sqlite3.connect(
                path,
                timeout=self.timeout,
                isolation_level=None,
                check_same_thread=False,
            )
        except (sqlite3.Error, OSError) as e:
            raise StoreUnavailable(f"Cannot open database at {self.path}: {e}") from e

        try:
            with transaction(conn):
                created = migrations.upgrade(conn)
        except StoreUnavailable:
            conn.close()
            raise
        except sqlite3.Error as e:
            conn.close()
            raise StoreUnavailable(f"Cannot open database at {self.path}: {e}") from e

        if created:
            logger.info(
                f"Upgraded {DB_MANIFEST['db_name']} to schema version "
                f"{DB_MANIFEST['schema_version']}, created {', '.join(created)}"
            )
        logger.info(f"Opened {DB_MANIFEST['db_name']} at {self.path}")
        return conn

    async def _run(self, func: Callable[[sqlite3.Connection], Any]) -> Any:
        async with self._lock:
            if self._conn is None:
                self._conn = await asyncio.to_thread(self._connect)
            return await asyncio.to_thread(func, self._conn)

    @staticmethod
    def _schema(collection: str) -> CollectionSchema:
        try:
            return COLLECTION_SCHEMAS[collection]
        except KeyError:
            raise UnknownCollection(f"Unknown collection '{collection}'") from None

    # ==================== Operations ====================

    async def put(self, collection: str, record: dict[str, Any]) -> Any:
        """
        Insert a record, or replace it in collections that allow overwrites.

        Auto-increment collections assign the key when the record has none.

        Returns:
            The record's key

        Raises:
            DuplicateKey: If the key exists and the collection does not overwrite
            TransactionFailed: If the write was rolled back
        """
        schema = self._schema(collection)
        key = record.get(schema.key_path)

        if key is None and not schema.auto_increment:
            raise ValueError(f"Record for '{collection}' is missing key '{schema.key_path}'")
        if key is not None and schema.auto_increment and (
            not isinstance(key, int) or isinstance(key, bool)
        ):
            raise ValueError(f"Key '{schema.key_path}' of '{collection}' must be an integer")
        if key is not None and not _is_bindable(key):
            raise ValueError(f"Key {key!r} of '{collection}' cannot be stored")

        document = _encode(record, schema.key_path)

        def _put(conn: sqlite3.Connection) -> Any:
            try:
                with transaction(conn):
                    if key is None:
                        cursor = conn.execute(
                            f"INSERT INTO {schema.name} (document) VALUES (?)",
                            (document,),
                        )
                        return cursor.lastrowid
                    if schema.overwrite:
                        conn.execute(
                            f"INSERT INTO {schema.name} ({schema.key_path}, document) "
                            f"VALUES (?, ?) ON CONFLICT({schema.key_path}) "
                            f"DO UPDATE SET document = excluded.document",
                            (key, document),
                        )
                    else:
                        conn.execute(
                            f"INSERT INTO {schema.name} ({schema.key_path}, document) "
                            f"VALUES (?, ?)",
                            (key, document),
                        )
                    return key
            except sqlite3.IntegrityError as e:
                if not schema.overwrite:
                    raise DuplicateKey(collection, key) from e
                logger.error(f"Put into '{collection}' rolled back: {e}")
                raise TransactionFailed(f"Put into '{collection}' failed: {e}") from e
            except sqlite3.Error as e:
                logger.error(f"Put into '{collection}' rolled back: {e}")
                raise TransactionFailed(f"Put into '{collection}' failed: {e}") from e

        return await self._run(_put)

    async def get(self, collection: str, key: Any) -> Optional[dict[str, Any]]:
        """
        Point lookup by primary key.

        Returns:
            The record, or None if not found
        """
        schema = self._schema(collection)
        if not _is_bindable(key):
            # No stored record can have this key
            return None

        def _get(conn: sqlite3.Connection) -> Optional[dict[str, Any]]:
            try:
                row = conn.execute(
                    f"SELECT {schema.key_path}, document FROM {schema.name} "
                    f"WHERE {schema.key_path} = ?",
                    (key,),
                ).fetchone()
            except sqlite3.Error as e:
                logger.error(f"Get from '{collection}' failed: {e}")
                raise TransactionFailed(f"Get from '{collection}' failed: {e}") from e
            if row is None:
                return None
            return _decode(row[0], row[1], schema.key_path)

        return await self._run(_get)

    async def get_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every record of a collection. Callers must not rely on the order."""
        schema = self._schema(collection)

        def _get_all(conn: sqlite3.Connection) -> list[dict[str, Any]]:
            try:
                rows = conn.execute(
                    f"SELECT {schema.key_path}, document FROM {schema.name}"
                ).fetchall()
            except sqlite3.Error as e:
                logger.error(f"Scan of '{collection}' failed: {e}")
                raise TransactionFailed(f"Scan of '{collection}' failed: {e}") from e
            return [_decode(key, document, schema.key_path) for key, document in rows]

        return await self._run(_get_all)

    async def delete(self, collection: str, key: Any) -> None:
        """Remove a record. Deleting a missing key is a no-op."""
        schema = self._schema(collection)
        if not _is_bindable(key):
            return

        def _delete(conn: sqlite3.Connection) -> None:
            try:
                with transaction(conn):
                    conn.execute(
                        f"DELETE FROM {schema.name} WHERE {schema.key_path} = ?",
                        (key,),
                    )
            except sqlite3.Error as e:
                logger.error(f"Delete from '{collection}' rolled back: {e}")
                raise TransactionFailed(f"Delete from '{collection}' failed: {e}") from e

        await self._run(_delete)
