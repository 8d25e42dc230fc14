"""
Core module - Errors, security and logging utilities.
"""
from entrystore.core.errors import (
    EntryStoreError,
    StoreError,
    StoreUnavailable,
    TransactionFailed,
    DuplicateKey,
    UnknownCollection,
    ServiceError,
    UsernameTaken,
    WeakCredential,
    InvalidCredentials,
    InvalidSession,
    NotAuthenticated,
    EntryNotFound,
    EntryNotOwned,
)
from entrystore.core.logging import configure_logging
from entrystore.core.security import (
    hash_password,
    verify_password,
    create_session_token,
    decode_session_token,
)

__all__ = [
    "EntryStoreError",
    "StoreError",
    "StoreUnavailable",
    "TransactionFailed",
    "DuplicateKey",
    "UnknownCollection",
    "ServiceError",
    "UsernameTaken",
    "WeakCredential",
    "InvalidCredentials",
    "InvalidSession",
    "NotAuthenticated",
    "EntryNotFound",
    "EntryNotOwned",
    "configure_logging",
    "hash_password",
    "verify_password",
    "create_session_token",
    "decode_session_token",
]
