"""
Interfaces for the stores that persist accounts and sessions.

The authority only talks to these interfaces. Implementations must raise
:class:`.StoreError` for infrastructure failures and must perform each
owner-checked write as a single atomic operation.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..domain import Account, AccountId, AccountRole, Credential, \
    SessionRecord, SessionToken


class AccountStore(ABC):
    """Persists accounts."""

    @abstractmethod
    def get_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Load an account by ID, or ``None``."""

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[Account]:
        """Load an account by username, or ``None``."""

    @abstractmethod
    def insert(self, username: str, role: AccountRole,
               owner_id: Optional[AccountId], credential: Credential,
               password_reset_required: bool = True) -> AccountId:
        """Create an account and return its new ID."""

    @abstractmethod
    def update_credential_if_owned(self, owner_id: AccountId,
                                   account_id: AccountId,
                                   credential: Credential,
                                   password_reset_required: bool = True) \
            -> bool:
        """
        Replace the credential of ``account_id`` if ``owner_id`` owns it.

        Returns ``False`` if no such account is owned by ``owner_id``.
        """

    @abstractmethod
    def delete_if_owned(self, owner_id: AccountId,
                        account_id: AccountId) -> bool:
        """
        Delete ``account_id`` if ``owner_id`` owns it.

        Everything the account owns (accounts, sessions) goes with it.
        Returns ``False`` if no such account is owned by ``owner_id``.
        """

    @abstractmethod
    def set_credential(self, account_id: AccountId, credential: Credential,
                       password_reset_required: bool = False) -> bool:
        """Replace the credential of an account. ``False`` if missing."""


class SessionStore(ABC):
    """Persists session tokens."""

    @abstractmethod
    def insert(self, token: SessionToken, account_id: AccountId) -> None:
        """Store a new session for an account."""

    @abstractmethod
    def lookup(self, token: SessionToken) -> Optional[SessionRecord]:
        """Find the account of a live session, with its reset flag."""

    @abstractmethod
    def delete(self, token: SessionToken) -> None:
        """Remove a session. Unknown tokens are ignored."""
