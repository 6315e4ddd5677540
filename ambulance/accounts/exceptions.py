"""
Exceptions.

Each operation of :class:`.authority.AccountAuthority` raises only
exceptions from its own family, so that callers can handle every case.
Infrastructure problems are wrapped in a single ``...Failed`` exception per
family; the underlying exception is kept as ``__cause__``.
"""

from typing import Optional


class StoreError(RuntimeError):
    """A store could not complete a read or write."""


class CredentialError(RuntimeError):
    """Failed to hash a password or to draw random bytes."""


class OperationFailed(RuntimeError):
    """An operation failed for reasons unrelated to its inputs."""

    @property
    def cause(self) -> Optional[BaseException]:
        """The underlying store or credential exception."""
        return self.__cause__


# Families.

class AccountCreationError(RuntimeError):
    """Failed to create an account."""


class AccountManagementError(RuntimeError):
    """An owner failed to reset or delete an account."""


class ChangePasswordError(RuntimeError):
    """Failed to change a password."""


class LoginError(RuntimeError):
    """Failed to log in."""


class SessionDeletionError(RuntimeError):
    """Failed to destroy a session."""


class SessionRetrievalError(RuntimeError):
    """Failed to resolve a session token to an account."""


# Domain errors.

class OwnerNotFound(AccountCreationError):
    """The account specified as owner does not exist."""


class InvalidOwnerRole(AccountCreationError):
    """
    The owner's role may not own an account of the requested role.

    A site admin can only create admins, an admin can only create users, and
    a user cannot create accounts.
    """


class UserNotFound(AccountManagementError, ChangePasswordError, LoginError):
    """
    The account does not exist.

    For owner operations this is also raised when the account exists but is
    not owned by the caller.
    """


class IncorrectPassword(ChangePasswordError, LoginError):
    """Password is not correct."""


class InvalidToken(SessionRetrievalError):
    """Session token is not valid or does not exist."""


class InvalidPurpose(SessionRetrievalError):
    """The account must change its password before doing anything else."""


# Infrastructure errors.

class AccountCreationFailed(AccountCreationError, OperationFailed):
    """Could not create the account."""


class AccountManagementFailed(AccountManagementError, OperationFailed):
    """Could not reset or delete the account."""


class ChangePasswordFailed(ChangePasswordError, OperationFailed):
    """Could not change the password."""


class LoginFailed(LoginError, OperationFailed):
    """Could not log in."""


class SessionDeletionFailed(SessionDeletionError, OperationFailed):
    """Could not delete the session from the session store."""


class SessionRetrievalFailed(SessionRetrievalError, OperationFailed):
    """Could not load the session from the session store."""
