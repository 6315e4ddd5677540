"""Testing helpers."""

import shutil
import tempfile
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.engine import Engine

from ..credentials import CredentialCodec
from ..services import util


def fast_codec() -> CredentialCodec:
    """A codec with the cheapest Argon2 parameters, so tests run quickly."""
    return CredentialCodec(time_cost=1, memory_cost=8, parallelism=1)


@contextmanager
def temporary_db() -> Generator[Engine, None, None]:
    """Provide a throwaway sqlite database with the account schema."""
    db_path = tempfile.mkdtemp()
    engine = util.get_engine(f'sqlite:///{db_path}/test.db')
    util.create_all(engine)
    try:
        yield engine
    finally:
        util.drop_all(engine)
        engine.dispose()
        shutil.rmtree(db_path)
