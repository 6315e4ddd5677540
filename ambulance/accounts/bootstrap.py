"""
Script for creating the first site admin of a deployment.

.. code-block:: bash

   $ ACCOUNTS_DATABASE_URI=postgresql://... create-site-admin --username root
   Created site admin 5b0a7c1e-...
   Temporary password: ...

The temporary password is shown once and must be changed at first login.
"""

import sys

import click

from . import config
from .app_logging import setup_logger
from .exceptions import AccountCreationFailed
from .factory import create_authority
from .services import util


@click.command()
@click.option('--username', prompt='Username for the site admin')
@click.option('--database-uri', default=config.ACCOUNTS_DATABASE_URI,
              show_default=True, help='SQLAlchemy URL of the account database')
def create_site_admin(username: str, database_uri: str) -> None:
    """Create an unowned site admin account."""
    setup_logger(config.LOGLEVEL, json=config.LOG_JSON == '1')
    engine = util.get_engine(database_uri)
    if not util.is_available(engine):
        click.echo(f'Cannot reach the database at {database_uri}', err=True)
        sys.exit(1)
    util.create_all(engine)

    authority = create_authority({'ACCOUNTS_DATABASE_URI': database_uri,
                                  'SESSION_BACKEND': 'database'},
                                 engine=engine)
    try:
        account_id, password = authority.create_site_admin(username)
    except AccountCreationFailed as e:
        click.echo(f'Could not create {username}: {e.cause}', err=True)
        sys.exit(1)
    click.echo(f'Created site admin {account_id}')
    click.echo(f'Temporary password: {password}')


if __name__ == '__main__':
    create_site_admin()
