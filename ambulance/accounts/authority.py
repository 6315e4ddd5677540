"""
Account and session authority.

All account and session operations go through :class:`AccountAuthority`.
It keeps no state between calls; every call is at most one authorization
checked read or read-modify-write against the stores.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional, Tuple, Type

from .credentials import CredentialCodec, TEMPORARY_PASSWORD_LENGTH
from .domain import AccountId, AccountRole, Purpose, SessionToken
from .exceptions import CredentialError, StoreError, OperationFailed, \
    AccountCreationFailed, AccountManagementFailed, ChangePasswordFailed, \
    LoginFailed, SessionDeletionFailed, SessionRetrievalFailed, \
    OwnerNotFound, InvalidOwnerRole, UserNotFound, IncorrectPassword, \
    InvalidToken, InvalidPurpose
from .services.base import AccountStore, SessionStore

logger = logging.getLogger(__name__)


@contextmanager
def _wrap_failures(failure: Type[OperationFailed],
                   message: str) -> Generator[None, None, None]:
    """Re-raise store and credential problems as ``failure``."""
    try:
        yield
    except (StoreError, CredentialError) as e:
        logger.error('%s: %s', message, e)
        raise failure(message) from e


class AccountAuthority(object):
    """
    Creates and manages accounts, and issues and checks session tokens.

    Parameters
    ----------
    accounts : :class:`.AccountStore`
    sessions : :class:`.SessionStore`
    codec : :class:`.CredentialCodec`
    temporary_password_length : int
        Length of passwords generated on creation and reset.
    """

    def __init__(self, accounts: AccountStore, sessions: SessionStore,
                 codec: CredentialCodec,
                 temporary_password_length: int = TEMPORARY_PASSWORD_LENGTH) \
            -> None:
        self._accounts = accounts
        self._sessions = sessions
        self._codec = codec
        self._temporary_password_length = temporary_password_length

    def create_account(self, owner_id: AccountId, role: AccountRole,
                       username: str) -> Tuple[AccountId, str]:
        """
        Create an account owned by ``owner_id``.

        A site admin can only create admins, an admin can only create users,
        and a user cannot create accounts. The new account must change its
        password before its sessions can be used for anything else.

        Parameters
        ----------
        owner_id : :class:`.AccountId`
        role : :class:`.AccountRole`
            Role of the new account.
        username : str

        Returns
        -------
        :class:`.AccountId`
            ID of the new account.
        str
            Temporary password. It is not stored anywhere and cannot be
            retrieved again.

        Raises
        ------
        :class:`.OwnerNotFound`
        :class:`.InvalidOwnerRole`
        :class:`.AccountCreationFailed`
            Includes username collisions.

        """
        with _wrap_failures(AccountCreationFailed, 'Could not load owner'):
            owner = self._accounts.get_by_id(owner_id)
        if owner is None:
            raise OwnerNotFound(f'No account {owner_id}')
        if not owner.role.can_own(role):
            logger.info('Account %s (%s) may not own a %s', owner_id,
                        owner.role.value, role.value)
            raise InvalidOwnerRole(
                f'A {owner.role.value} cannot create a {role.value}'
            )
        account_id, password = self._create(username, role, owner_id)
        logger.info('Account %s created %s %s', owner_id, role.value,
                    account_id)
        return account_id, password

    def create_site_admin(self, username: str) -> Tuple[AccountId, str]:
        """
        Create an unowned site admin.

        This is how a deployment is bootstrapped; there is no authorization
        check, so it must not be reachable by end users.

        Raises
        ------
        :class:`.AccountCreationFailed`

        """
        account_id, password = self._create(username, AccountRole.SITE_ADMIN,
                                             None)
        logger.info('Site admin %s created', account_id)
        return account_id, password

    def reset_password(self, owner_id: AccountId,
                       account_id: AccountId) -> str:
        """
        Replace the password of an owned account with a temporary one.

        The account must change its password again before its sessions can
        be used for anything else.

        Raises
        ------
        :class:`.UserNotFound`
            The account does not exist, or ``owner_id`` does not own it.
        :class:`.AccountManagementFailed`

        """
        with _wrap_failures(AccountManagementFailed,
                            'Could not reset password'):
            password = self._codec.random_temporary_password(
                self._temporary_password_length
            )
            credential = self._codec.new_credential(password)
            updated = self._accounts.update_credential_if_owned(
                owner_id, account_id, credential, password_reset_required=True
            )
        if not updated:
            raise UserNotFound(f'No account {account_id} owned by {owner_id}')
        logger.info('Account %s reset password of %s', owner_id, account_id)
        return password

    def delete_account(self, owner_id: AccountId,
                       account_id: AccountId) -> None:
        """
        Delete an owned account, along with everything it owns.

        Raises
        ------
        :class:`.UserNotFound`
            The account does not exist, or ``owner_id`` does not own it.
        :class:`.AccountManagementFailed`

        """
        with _wrap_failures(AccountManagementFailed,
                            'Could not delete account'):
            deleted = self._accounts.delete_if_owned(owner_id, account_id)
        if not deleted:
            raise UserNotFound(f'No account {account_id} owned by {owner_id}')
        logger.info('Account %s deleted %s', owner_id, account_id)

    def change_password(self, account_id: AccountId, current_password: str,
                        new_password: str) -> None:
        """
        Change a password if the current one is correct.

        No password requirements are enforced here. A successful change
        lifts the reset requirement.

        Raises
        ------
        :class:`.UserNotFound`
        :class:`.IncorrectPassword`
        :class:`.ChangePasswordFailed`

        """
        with _wrap_failures(ChangePasswordFailed,
                            'Could not change password'):
            account = self._accounts.get_by_id(account_id)
            if account is None:
                raise UserNotFound(f'No account {account_id}')
            if not self._codec.verify(current_password, account.credential):
                raise IncorrectPassword('Incorrect password')
            credential = self._codec.new_credential(new_password)
            updated = self._accounts.set_credential(
                account_id, credential, password_reset_required=False
            )
        # Deleted between the read and the write.
        if not updated:
            raise UserNotFound(f'No account {account_id}')
        logger.info('Account %s changed its password', account_id)

    def login(self, username: str, password: str) -> SessionToken:
        """
        Start a session.

        An account may hold any number of sessions at once.

        Raises
        ------
        :class:`.UserNotFound`
        :class:`.IncorrectPassword`
        :class:`.LoginFailed`

        """
        with _wrap_failures(LoginFailed, 'Could not log in'):
            account = self._accounts.get_by_username(username)
            if account is None:
                logger.debug('No such user: %s', username)
                raise UserNotFound(f'No account named {username}')
            if not self._codec.verify(password, account.credential):
                logger.debug('Incorrect password for %s', username)
                raise IncorrectPassword('Incorrect password')
            token = self._codec.random_session_token()
            self._sessions.insert(token, account.account_id)
        logger.info('Account %s logged in', account.account_id)
        return token

    def destroy_session(self, token: SessionToken) -> None:
        """
        End a session. Unknown tokens are ignored.

        Raises
        ------
        :class:`.SessionDeletionFailed`

        """
        with _wrap_failures(SessionDeletionFailed,
                            'Could not delete session'):
            self._sessions.delete(token)

    def retrieve_account(self, token: SessionToken,
                         purpose: Purpose) -> AccountId:
        """
        Get the account that holds a session.

        If the account must change its password, the session is only good
        for :attr:`.Purpose.CHANGE_PASSWORD`.

        Raises
        ------
        :class:`.InvalidToken`
        :class:`.InvalidPurpose`
        :class:`.SessionRetrievalFailed`

        """
        with _wrap_failures(SessionRetrievalFailed,
                            'Could not load session'):
            record = self._sessions.lookup(token)
        if record is None:
            raise InvalidToken('Session token is not valid')
        if record.password_reset_required \
                and purpose is not Purpose.CHANGE_PASSWORD:
            raise InvalidPurpose(
                f'Account {record.account_id} must change its password'
            )
        return record.account_id

    def _create(self, username: str, role: AccountRole,
                owner_id: Optional[AccountId]) -> Tuple[AccountId, str]:
        with _wrap_failures(AccountCreationFailed,
                            'Could not create account'):
            password = self._codec.random_temporary_password(
                self._temporary_password_length
            )
            credential = self._codec.new_credential(password)
            account_id = self._accounts.insert(
                username, role, owner_id, credential,
                password_reset_required=True
            )
        return account_id, password
