"""Helpers for the account database."""

import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from .models import Base

logger = logging.getLogger(__name__)


def get_engine(db_uri: str, **kwargs: Any) -> Engine:
    """
    Create an engine for the account database.

    SQLite does not enforce foreign keys unless asked to on every connection;
    the cascades on ``owner_id`` and ``sessions.account_id`` depend on it.
    """
    engine = create_engine(db_uri, **kwargs)
    if engine.dialect.name == 'sqlite':
        event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


def get_session_factory(engine: Engine) -> sessionmaker:
    """Get a session factory bound to ``engine``."""
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def transaction(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager for database transaction."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.error('Commit failed, rolling back: %s', str(e))
        session.rollback()
        raise
    finally:
        session.close()


def create_all(engine: Engine) -> None:
    """Create all tables in the database."""
    Base.metadata.create_all(engine)


def drop_all(engine: Engine) -> None:
    """Drop all tables in the database."""
    Base.metadata.drop_all(engine)


def is_available(engine: Engine) -> bool:
    """Check our connection to the database."""
    try:
        with engine.connect() as connection:
            connection.execute(text('SELECT 1'))
    except Exception as e:
        logger.error('Encountered an error talking to database: %s', e)
        return False
    return True
