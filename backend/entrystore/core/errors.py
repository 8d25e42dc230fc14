"""
Exception hierarchy shared by the store and the service layer.

Store errors describe what happened to the database; service errors are the
outcome vocabulary handed to callers of AuthService.
"""


class EntryStoreError(Exception):
    """Base class for every error raised by entrystore."""


# ==================== Store ====================

class StoreError(EntryStoreError):
    """Base class for RecordStore failures."""


class StoreUnavailable(StoreError):
    """The database file cannot be opened or has an unsupported version."""


class TransactionFailed(StoreError):
    """A transaction was rolled back; nothing was written."""


class DuplicateKey(StoreError):
    """A non-overwriting put hit a key that already exists."""

    def __init__(self, collection: str, key):
        super().__init__(f"Key {key!r} already exists in '{collection}'")
        self.collection = collection
        self.key = key


class UnknownCollection(StoreError, ValueError):
    """The collection name is not part of the schema."""


# ==================== Service ====================

class ServiceError(EntryStoreError):
    """Base class for AuthService outcomes."""


class UsernameTaken(ServiceError):
    """Registration attempted with a username that is already registered."""


class WeakCredential(ServiceError, ValueError):
    """Username or password is shorter than the configured minimum."""


class InvalidCredentials(ServiceError):
    """Unknown username or wrong password (deliberately indistinguishable)."""


class InvalidSession(ServiceError):
    """A session token is malformed, expired or belongs to no user."""


class NotAuthenticated(ServiceError):
    """The operation needs an active session and there is none."""


class EntryNotFound(ServiceError):
    """No entry exists with the given id."""

    def __init__(self, entry_id: int):
        super().__init__(f"Entry {entry_id} not found")
        self.entry_id = entry_id


class EntryNotOwned(ServiceError):
    """The entry belongs to a different identity."""

    def __init__(self, entry_id: int):
        super().__init__(f"Entry {entry_id} is not owned by the current user")
        self.entry_id = entry_id
