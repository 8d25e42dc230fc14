"""
Session model for the authenticated client.
"""
from typing import Optional

from pydantic import BaseModel, Field


class Session(BaseModel):
    """
    Authenticated session held in memory by AuthService.

    Not persisted in the store. ``token`` may be kept by the caller in
    volatile storage and handed to ``AuthService.restore_session`` after a
    reload.
    """
    username: str = Field(..., description="Authenticated identity")
    token: str = Field(..., description="Signed session token")
    editing_id: Optional[int] = Field(None, description="Entry currently being edited")

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None
