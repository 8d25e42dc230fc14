"""
Pydantic models for stored documents and the in-memory session.
"""
from entrystore.models.user import User
from entrystore.models.entry import Entry, EntryContent
from entrystore.models.session import Session

__all__ = [
    "User",
    "Entry",
    "EntryContent",
    "Session",
]
