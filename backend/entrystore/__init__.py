"""
entrystore - Local record store with per-user ownership and password login.
"""
from entrystore.database.record_store import RecordStore
from entrystore.main import lifespan
from entrystore.services.auth_service import AuthService

__version__ = "0.1.0"

__all__ = [
    "RecordStore",
    "AuthService",
    "lifespan",
    "__version__",
]
