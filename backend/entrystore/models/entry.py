"""
Entry models for the entries collection.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EntryContent(BaseModel):
    """The user-editable fields of an entry."""
    name: str = Field(..., description="Name")
    address: str = Field(..., description="Address")
    license: str = Field(..., description="License")


class Entry(EntryContent):
    """
    Entry document model for the entries collection.

    Stored as ``{"id", "userId", "name", "address", "license"}``.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(None, description="Store-assigned id")
    user_id: str = Field(..., alias="userId", description="Owner username")

    def to_document(self) -> dict:
        """Record as stored in the entries collection; id is left out until assigned."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def is_owned_by(self, identity: str) -> bool:
        return self.user_id == identity
