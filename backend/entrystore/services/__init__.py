"""
Service layer for business logic.
"""
from entrystore.services.auth_service import AuthService

__all__ = [
    "AuthService",
]
