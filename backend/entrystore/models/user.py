"""
User model for the users collection.
"""
from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """
    User document model for the users collection.

    Stored as ``{"username": ..., "passwordHash": ...}``.
    """
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., description="Unique, case-sensitive username")
    password_hash: str = Field(
        ...,
        alias="passwordHash",
        description="Password hash; never the plaintext",
    )

    def to_document(self) -> dict:
        """Record as stored in the users collection."""
        return self.model_dump(by_alias=True)
