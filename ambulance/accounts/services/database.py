"""
SQL-backed account and session stores.

Works with any SQLAlchemy database URL; production uses PostgreSQL, the
tests use SQLite. Owner-checked writes are single ``UPDATE``/``DELETE``
statements filtered on both the target and the owner, so there is no window
between checking ownership and applying the change.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..domain import Account, AccountId, AccountRole, Credential, \
    SessionRecord, SessionToken
from ..exceptions import StoreError
from . import util
from .base import AccountStore, SessionStore
from .models import DBAccount, DBSession

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(action: str) -> Generator[None, None, None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise StoreError(f'Failed to {action}: {e}') from e


class SQLAccountStore(AccountStore):
    """Accounts in the ``accounts`` table."""

    def __init__(self, engine: Engine) -> None:
        self._sessions = util.get_session_factory(engine)

    def get_by_id(self, account_id: AccountId) -> Optional[Account]:
        with _store_errors('load account'):
            with util.transaction(self._sessions) as session:
                db_account = session.get(DBAccount, account_id)
                if db_account is None:
                    return None
                return db_account.to_domain()

    def get_by_username(self, username: str) -> Optional[Account]:
        with _store_errors('load account'):
            with util.transaction(self._sessions) as session:
                db_account = session.scalar(
                    select(DBAccount).where(DBAccount.username == username)
                )
                if db_account is None:
                    return None
                return db_account.to_domain()

    def insert(self, username: str, role: AccountRole,
               owner_id: Optional[AccountId], credential: Credential,
               password_reset_required: bool = True) -> AccountId:
        with _store_errors('create account'):
            with util.transaction(self._sessions) as session:
                account_id = AccountId(uuid.uuid4())
                session.add(DBAccount(
                    account_id=account_id,
                    username=username,
                    role=role,
                    owner_id=owner_id,
                    password_hash=credential.hash,
                    password_salt=credential.salt,
                    password_reset_needed=password_reset_required
                ))
        logger.debug('Inserted account %s (%s)', account_id, role.value)
        return account_id

    def update_credential_if_owned(self, owner_id: AccountId,
                                   account_id: AccountId,
                                   credential: Credential,
                                   password_reset_required: bool = True) \
            -> bool:
        with _store_errors('update credential'):
            with util.transaction(self._sessions) as session:
                result = session.execute(
                    update(DBAccount)
                    .where(DBAccount.account_id == account_id)
                    .where(DBAccount.owner_id == owner_id)
                    .values(password_hash=credential.hash,
                            password_salt=credential.salt,
                            password_reset_needed=password_reset_required)
                    .execution_options(synchronize_session=False)
                )
                return bool(result.rowcount)

    def delete_if_owned(self, owner_id: AccountId,
                        account_id: AccountId) -> bool:
        with _store_errors('delete account'):
            with util.transaction(self._sessions) as session:
                result = session.execute(
                    delete(DBAccount)
                    .where(DBAccount.account_id == account_id)
                    .where(DBAccount.owner_id == owner_id)
                    .execution_options(synchronize_session=False)
                )
                return bool(result.rowcount)

    def set_credential(self, account_id: AccountId, credential: Credential,
                       password_reset_required: bool = False) -> bool:
        with _store_errors('update credential'):
            with util.transaction(self._sessions) as session:
                result = session.execute(
                    update(DBAccount)
                    .where(DBAccount.account_id == account_id)
                    .values(password_hash=credential.hash,
                            password_salt=credential.salt,
                            password_reset_needed=password_reset_required)
                    .execution_options(synchronize_session=False)
                )
                return bool(result.rowcount)


class SQLSessionStore(SessionStore):
    """Sessions in the ``sessions`` table, joined to ``accounts`` on read."""

    def __init__(self, engine: Engine) -> None:
        self._sessions = util.get_session_factory(engine)

    def insert(self, token: SessionToken, account_id: AccountId) -> None:
        with _store_errors('create session'):
            with util.transaction(self._sessions) as session:
                session.add(DBSession(session_id=token.value,
                                      account_id=account_id))

    def lookup(self, token: SessionToken) -> Optional[SessionRecord]:
        with _store_errors('load session'):
            with util.transaction(self._sessions) as session:
                row = session.execute(
                    select(DBAccount.account_id,
                           DBAccount.password_reset_needed)
                    .join(DBSession,
                          DBSession.account_id == DBAccount.account_id)
                    .where(DBSession.session_id == token.value)
                ).first()
        if row is None:
            return None
        account_id, reset_needed = row
        return SessionRecord(AccountId(account_id), bool(reset_needed))

    def delete(self, token: SessionToken) -> None:
        with _store_errors('delete session'):
            with util.transaction(self._sessions) as session:
                session.execute(
                    delete(DBSession)
                    .where(DBSession.session_id == token.value)
                    .execution_options(synchronize_session=False)
                )
