"""
Account and session authority for the ambulance tracking services.

This package owns user accounts and login sessions. Accounts form a strict
ownership hierarchy (site admin → admin → user); only an account's owner may
reset its password or delete it. Sessions are opaque tokens issued at login,
and an account whose password was issued by someone else (on creation or
reset) can use its sessions for nothing but changing that password.

Quick start
-----------

.. code-block:: python

   from ambulance.accounts import Purpose, factory
   from ambulance.accounts.services import util

   authority = factory.create_authority()
   util.create_all(util.get_engine(factory.get_config()['ACCOUNTS_DATABASE_URI']))

   root_id, root_password = authority.create_site_admin('root')
   token = authority.login('root', root_password)
   authority.retrieve_account(token, Purpose.CHANGE_PASSWORD)   # -> root_id

Every operation lives on :class:`.AccountAuthority` and raises only
exceptions from its own family in :mod:`.exceptions`.
"""

from .domain import Account, AccountId, AccountRole, Credential, Purpose, \
    SessionToken, can_own
from .authority import AccountAuthority
