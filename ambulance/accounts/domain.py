"""Defines account and session concepts for the ambulance tracking services."""

from enum import Enum
from typing import NamedTuple, NewType, Optional
from uuid import UUID

AccountId = NewType('AccountId', UUID)
"""Unique identifier for an :class:`.Account`."""


class AccountRole(Enum):
    """
    Privilege level of an account.

    Roles form a strict two-level ownership hierarchy: a site admin owns
    admins, an admin owns users, and a user owns nothing.
    """

    USER = 'user'
    ADMIN = 'admin'
    SITE_ADMIN = 'site_admin'

    def can_own(self, subject: 'AccountRole') -> bool:
        """Whether an account with this role may own one with ``subject``."""
        return (self, subject) in _OWNERSHIP


_OWNERSHIP = frozenset([
    (AccountRole.SITE_ADMIN, AccountRole.ADMIN),
    (AccountRole.ADMIN, AccountRole.USER),
])


def can_own(owner_role: AccountRole, subject_role: AccountRole) -> bool:
    """
    Determine whether ``owner_role`` may create and own ``subject_role``.

    Parameters
    ----------
    owner_role : :class:`.AccountRole`
    subject_role : :class:`.AccountRole`

    Returns
    -------
    bool

    """
    return owner_role.can_own(subject_role)


class Purpose(Enum):
    """What a caller intends to do with an authenticated session."""

    CHANGE_PASSWORD = 'change_password'
    """The session is needed to change the account password."""

    OTHER = 'other'
    """Anything else."""


class Credential(NamedTuple):
    """Salted password hash. The cleartext password is never kept."""

    hash: bytes
    """32-byte Argon2id digest."""

    salt: bytes
    """16-byte random salt."""


class Account(NamedTuple):
    """Snapshot of a persisted account."""

    account_id: AccountId
    """Unique identifier for the account."""

    username: str
    """Login name; unique across all accounts."""

    role: AccountRole
    """Privilege level. Immutable after creation."""

    credential: Credential
    """Current password material."""

    owner_id: Optional[AccountId] = None
    """The account that manages this one. ``None`` only for site admins."""

    password_reset_required: bool = True
    """If set, sessions are only good for changing the password."""


class SessionToken(NamedTuple):
    """Opaque bearer token identifying an authenticated session."""

    value: bytes
    """32 random bytes."""

    def hex(self) -> str:
        """Text form of the token, e.g. for a cookie or header."""
        return self.value.hex()

    @classmethod
    def from_hex(cls, encoded: str) -> 'SessionToken':
        """Inverse of :meth:`hex`."""
        return cls(bytes.fromhex(encoded))

    def __repr__(self) -> str:
        """Never expose the secret in logs or tracebacks."""
        return 'SessionToken(...)'


class SessionRecord(NamedTuple):
    """A stored session joined with the state of its account."""

    account_id: AccountId
    password_reset_required: bool
