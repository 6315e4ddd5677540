"""
Session store backed by Redis.

Sessions are kept as ``session:<hex token>`` keys whose value is the account
ID. Redis cannot join against the account database, so :meth:`lookup` reads
the account's reset flag from an :class:`.AccountStore`; a session whose
account has been deleted is treated as unknown.
"""

import logging
from typing import Any, Optional
from uuid import UUID

import redis

from ..domain import AccountId, SessionRecord, SessionToken
from ..exceptions import StoreError
from .base import AccountStore, SessionStore

logger = logging.getLogger(__name__)

KEY_PREFIX = 'session:'


class RedisSessionStore(SessionStore):
    """
    Manages sessions in Redis.

    In fact, the StrictRedis instance is thread safe and connections are
    attached at the time a command is executed. This class simply provides a
    container for configuration.

    Parameters
    ----------
    connection : :class:`redis.StrictRedis`
    accounts : :class:`.AccountStore`
        Source of truth for whether an account still exists and whether it
        must change its password.
    duration : int
        Session lifetime in seconds. ``0`` keeps sessions until deleted.
    """

    def __init__(self, connection: Any, accounts: AccountStore,
                 duration: int = 0) -> None:
        self.r = connection
        self._accounts = accounts
        self._duration = duration

    @classmethod
    def connect(cls, host: str, port: int, db: int, accounts: AccountStore,
                duration: int = 0, token: Optional[str] = None) \
            -> 'RedisSessionStore':
        """Open the connection to Redis."""
        logger.debug('New Redis connection at %s, port %s', host, port)
        connection = redis.StrictRedis(host=host, port=port, db=db,
                                       password=token)
        return cls(connection, accounts, duration=duration)

    def insert(self, token: SessionToken, account_id: AccountId) -> None:
        try:
            self.r.set(self._key(token), str(account_id),
                       ex=self._duration or None)
        except redis.exceptions.ConnectionError as e:
            raise StoreError(f'Connection failed: {e}') from e
        except redis.exceptions.RedisError as e:
            raise StoreError(f'Failed to create: {e}') from e

    def lookup(self, token: SessionToken) -> Optional[SessionRecord]:
        try:
            raw = self.r.get(self._key(token))
        except redis.exceptions.RedisError as e:
            raise StoreError(f'Failed to load session: {e}') from e
        if not raw:
            return None
        try:
            if isinstance(raw, bytes):
                raw = raw.decode('ascii')
            account_id = AccountId(UUID(raw))
        except ValueError as e:
            raise StoreError('Stored session is malformed') from e

        account = self._accounts.get_by_id(account_id)
        if account is None:
            logger.debug('Session refers to deleted account %s', account_id)
            return None
        return SessionRecord(account.account_id,
                             account.password_reset_required)

    def delete(self, token: SessionToken) -> None:
        try:
            self.r.delete(self._key(token))
        except redis.exceptions.ConnectionError as e:
            raise StoreError(f'Connection failed: {e}') from e
        except redis.exceptions.RedisError as e:
            raise StoreError(f'Failed to delete: {e}') from e

    @staticmethod
    def _key(token: SessionToken) -> str:
        return KEY_PREFIX + token.hex()
