"""
Authentication service for user management, sessions and owned entries.
"""
import logging
from typing import Optional

from entrystore.config import Settings, get_settings
from entrystore.core.errors import (
    DuplicateKey,
    EntryNotFound,
    EntryNotOwned,
    InvalidCredentials,
    InvalidSession,
    NotAuthenticated,
    UsernameTaken,
    WeakCredential,
)
from entrystore.core.security import (
    JWTError,
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from entrystore.database.collections import Collections
from entrystore.database.record_store import RecordStore
from entrystore.models.entry import Entry, EntryContent
from entrystore.models.session import Session
from entrystore.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


class AuthService:
    """
    Service for credentials, the active session and owner-scoped entries.

    Every entry read or write goes through the ownership filter: the store
    itself has no notion of owners.
    """

    def __init__(self, store: RecordStore, settings: Optional[Settings] = None):
        """Initialize with the record store."""
        self.store = store
        self.settings = settings or get_settings()
        self._session: Optional[Session] = None

    # ==================== Credentials ====================

    async def register(self, username: str, password: str) -> User:
        """
        Register a new user.

        Args:
            username: Unique, case-sensitive username
            password: Plain text password

        Returns:
            The stored User

        Raises:
            WeakCredential: If username or password is too short
            UsernameTaken: If the username is already registered
            ValueError: If the username cannot be encoded as UTF-8
        """
        if len(username) < self.settings.min_username_length:
            raise WeakCredential(
                f"Username must be at least {self.settings.min_username_length} characters long"
            )
        if len(password) < self.settings.min_password_length:
            raise WeakCredential(
                f"Password must be at least {self.settings.min_password_length} characters long"
            )

        user = User(
            username=username,
            password_hash=hash_password(password, self.settings),
        )

        try:
            await self.store.put(Collections.USERS, user.to_document())
        except DuplicateKey:
            raise UsernameTaken(f"Username '{username}' is already taken") from None

        logger.info(f"Registered user '{username}'")
        return user

    async def get_user(self, username: str) -> Optional[User]:
        """
        Get user by username.

        Returns:
            User model or None if not found
        """
        user_doc = await self.store.get(Collections.USERS, username)
        if not user_doc:
            return None
        return User.model_validate(user_doc)

    async def login(self, username: str, password: str) -> str:
        """
        Authenticate a user and start a session.

        Returns:
            The authenticated identity (the username)

        Raises:
            InvalidCredentials: If the user is unknown or the password is wrong
        """
        user = await self.get_user(username)

        if user is None or not verify_password(password, user.password_hash, self.settings):
            logger.info(f"Failed login for '{username}'")
            raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

        self._start_session(user.username)
        logger.info(f"User '{username}' logged in")
        return user.username

    def logout(self) -> None:
        """End the current session, if any."""
        if self._session is not None:
            logger.info(f"User '{self._session.username}' logged out")
        self._session = None

    async def restore_session(self, token: str) -> str:
        """
        Start a session from a token issued by an earlier login.

        Returns:
            The restored identity

        Raises:
            InvalidSession: If the token is invalid, expired or its user is gone
        """
        try:
            payload = decode_session_token(token, self.settings)
        except JWTError as e:
            raise InvalidSession("Session token is invalid or expired") from e

        username = payload.get("sub")
        if not username or await self.get_user(username) is None:
            raise InvalidSession("Session token does not belong to a registered user")

        self._start_session(username)
        logger.info(f"Restored session for '{username}'")
        return username

    # ==================== Session ====================

    def _start_session(self, username: str) -> Session:
        self._session = Session(
            username=username,
            token=create_session_token(username, settings=self.settings),
        )
        return self._session

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def current_user(self) -> Optional[str]:
        return self._session.username if self._session else None

    def require_session(self) -> Session:
        """Return the active session or raise NotAuthenticated."""
        if self._session is None:
            raise NotAuthenticated("Login required")
        return self._session

    # ==================== Entry CRUD ====================

    async def list_owned_entries(self, identity: str) -> list[Entry]:
        """List all entries owned by ``identity``, ordered by id."""
        entry_docs = await self.store.get_all(Collections.ENTRIES)
        entries = [Entry.model_validate(doc) for doc in entry_docs]
        return sorted(
            (e for e in entries if e.is_owned_by(identity)),
            key=lambda e: e.id,
        )

    async def add_entry(self, identity: str, name: str, address: str, license: str) -> Entry:
        """Create an entry owned by ``identity``."""
        content = EntryContent(name=name, address=address, license=license)
        entry = Entry(user_id=identity, **content.model_dump())
        entry.id = await self.store.put(Collections.ENTRIES, entry.to_document())
        logger.debug(f"User '{identity}' added entry {entry.id}")
        return entry

    async def _get_owned_entry(self, identity: str, entry_id: int) -> Entry:
        entry_doc = await self.store.get(Collections.ENTRIES, entry_id)
        if entry_doc is None:
            raise EntryNotFound(entry_id)

        entry = Entry.model_validate(entry_doc)
        if not entry.is_owned_by(identity):
            logger.warning(f"User '{identity}' refused access to entry {entry_id}")
            raise EntryNotOwned(entry_id)
        return entry

    async def update_entry(
        self,
        identity: str,
        entry_id: int,
        name: str,
        address: str,
        license: str,
    ) -> Entry:
        """
        Overwrite the content of an owned entry, keeping its id and owner.

        Raises:
            EntryNotFound: If no entry has this id
            EntryNotOwned: If the entry belongs to someone else
        """
        entry = await self._get_owned_entry(identity, entry_id)

        content = EntryContent(name=name, address=address, license=license)
        updated = entry.model_copy(update=content.model_dump())
        await self.store.put(Collections.ENTRIES, updated.to_document())
        logger.debug(f"User '{identity}' updated entry {entry_id}")
        return updated

    async def delete_entry(self, identity: str, entry_id: int) -> None:
        """
        Delete an owned entry. Deleting an id that does not exist succeeds.

        Raises:
            EntryNotOwned: If the entry belongs to someone else
        """
        try:
            await self._get_owned_entry(identity, entry_id)
        except EntryNotFound:
            return

        await self.store.delete(Collections.ENTRIES, entry_id)
        logger.debug(f"User '{identity}' deleted entry {entry_id}")

        if self._session is not None and self._session.editing_id == entry_id:
            self.cancel_edit()

    # ==================== Edit workflow ====================

    async def begin_edit(self, entry_id: int) -> Entry:
        """
        Mark an owned entry as being edited in the current session.

        Raises:
            NotAuthenticated: If no session is active
            EntryNotFound: If no entry has this id
            EntryNotOwned: If the entry belongs to someone else
        """
        session = self.require_session()
        entry = await self._get_owned_entry(session.username, entry_id)
        session.editing_id = entry_id
        return entry

    def cancel_edit(self) -> None:
        """Forget the entry being edited."""
        if self._session is not None:
            self._session.editing_id = None

    async def save_entry(self, name: str, address: str, license: str) -> Entry:
        """
        Update the entry being edited, or add a new one when none is.

        Raises:
            NotAuthenticated: If no session is active
        """
        session = self.require_session()

        if not session.is_editing:
            return await self.add_entry(session.username, name, address, license)

        entry = await self.update_entry(session.username, session.editing_id, name, address, license)
        self.cancel_edit()
        return entry
