"""Builds an :class:`.AccountAuthority` from configuration."""

import logging
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.engine import Engine

from . import config as default_config
from .authority import AccountAuthority
from .credentials import CredentialCodec
from .services import util
from .services.base import SessionStore
from .services.database import SQLAccountStore, SQLSessionStore
from .services.session_store import RedisSessionStore

logger = logging.getLogger(__name__)


def get_config(overrides: Optional[Mapping[str, Any]] = None) \
        -> Dict[str, Any]:
    """Get the configuration, with ``overrides`` taking precedence."""
    config = {key: getattr(default_config, key)
              for key in dir(default_config) if key.isupper()}
    if overrides:
        config.update(overrides)
    return config


def create_codec(config: Mapping[str, Any]) -> CredentialCodec:
    """Set up password hashing with the configured Argon2 costs."""
    return CredentialCodec(
        time_cost=int(config['ARGON2_TIME_COST']),
        memory_cost=int(config['ARGON2_MEMORY_COST']),
        parallelism=int(config['ARGON2_PARALLELISM'])
    )


def create_authority(overrides: Optional[Mapping[str, Any]] = None,
                     engine: Optional[Engine] = None) -> AccountAuthority:
    """
    Wire up the account authority.

    Parameters
    ----------
    overrides : mapping
        Configuration values that take precedence over :mod:`.config`.
    engine : :class:`sqlalchemy.engine.Engine`
        Use this engine instead of one built from ``ACCOUNTS_DATABASE_URI``.

    Returns
    -------
    :class:`.AccountAuthority`

    """
    config = get_config(overrides)
    if engine is None:
        engine = util.get_engine(config['ACCOUNTS_DATABASE_URI'])
    accounts = SQLAccountStore(engine)

    backend = config['SESSION_BACKEND']
    sessions: SessionStore
    if backend == 'database':
        sessions = SQLSessionStore(engine)
    elif backend == 'redis':
        sessions = RedisSessionStore.connect(
            config['REDIS_HOST'],
            int(config['REDIS_PORT']),
            int(config['REDIS_DATABASE']),
            accounts,
            duration=int(config['SESSION_DURATION']),
            token=config['REDIS_TOKEN']
        )
    else:
        raise ValueError(f'Unknown session backend: {backend}')
    logger.debug('Sessions are stored in %s', backend)

    return AccountAuthority(
        accounts, sessions, create_codec(config),
        temporary_password_length=int(config['TEMPORARY_PASSWORD_LENGTH'])
    )
