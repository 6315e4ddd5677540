"""Database models for accounts and sessions."""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, Enum, ForeignKey, \
    LargeBinary, String, Uuid, text
from sqlalchemy.orm import declarative_base

from ..domain import Account, AccountId, AccountRole, Credential

Base = declarative_base()


class DBAccount(Base):  # type: ignore
    """
    Accounts table.

    +-----------------------+--------------+------+-----+---------+
    | Field                 | Type         | Null | Key | Default |
    +-----------------------+--------------+------+-----+---------+
    | account_id            | uuid         | NO   | PRI |         |
    | username              | varchar(16)  | NO   | UNI |         |
    | password_hash         | bytea (32)   | NO   |     |         |
    | password_salt         | bytea (16)   | NO   |     |         |
    | role                  | account_role | NO   |     | user    |
    | owner_id              | uuid         | YES  | MUL | NULL    |
    | password_reset_needed | boolean      | NO   |     | true    |
    +-----------------------+--------------+------+-----+---------+

    ``owner_id`` cascades on delete, so removing an account removes every
    account below it.
    """

    __tablename__ = 'accounts'
    __table_args__ = (
        CheckConstraint('length(password_hash) = 32',
                        name='ck_accounts_hash_length'),
        CheckConstraint('length(password_salt) = 16',
                        name='ck_accounts_salt_length'),
    )

    account_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(16), nullable=False, unique=True, index=True)
    password_hash = Column(LargeBinary(32), nullable=False)
    password_salt = Column(LargeBinary(16), nullable=False)
    role = Column(
        Enum(AccountRole, name='account_role',
             values_callable=lambda roles: [role.value for role in roles]),
        nullable=False, default=AccountRole.USER
    )
    owner_id = Column(ForeignKey('accounts.account_id', ondelete='CASCADE'),
                      nullable=True, index=True)
    password_reset_needed = Column(Boolean, nullable=False, default=True,
                                   server_default=text('true'))

    def to_domain(self) -> Account:
        """Make an :class:`.Account` snapshot from this row."""
        return Account(
            account_id=AccountId(self.account_id),
            username=self.username,
            role=self.role,
            owner_id=AccountId(self.owner_id) if self.owner_id else None,
            credential=Credential(hash=bytes(self.password_hash),
                                  salt=bytes(self.password_salt)),
            password_reset_required=bool(self.password_reset_needed)
        )


class DBSession(Base):  # type: ignore
    """
    Sessions table.

    +------------+------------+------+-----+
    | Field      | Type       | Null | Key |
    +------------+------------+------+-----+
    | session_id | bytea (32) | NO   | PRI |
    | account_id | uuid       | NO   | MUL |
    +------------+------------+------+-----+
    """

    __tablename__ = 'sessions'
    __table_args__ = (
        CheckConstraint('length(session_id) = 32',
                        name='ck_sessions_token_length'),
    )

    session_id = Column(LargeBinary(32), primary_key=True)
    account_id = Column(ForeignKey('accounts.account_id', ondelete='CASCADE'),
                        nullable=False, index=True)
