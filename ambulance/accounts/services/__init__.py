"""
Persistence for accounts and sessions.

:mod:`.base` defines the store interfaces that the authority depends on.
:mod:`.database` implements both of them on a SQL database, and
:mod:`.session_store` provides an alternative session store on Redis.
"""

from .base import AccountStore, SessionStore
from .database import SQLAccountStore, SQLSessionStore
from .session_store import RedisSessionStore
