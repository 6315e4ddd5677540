"""Password hashing and secure random generation."""

import hmac
import logging
import secrets
import string
from typing import Callable, Union

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw

from .domain import Credential, SessionToken
from .exceptions import CredentialError

logger = logging.getLogger(__name__)

HASH_LENGTH = 32
SALT_LENGTH = 16
TOKEN_LENGTH = 32
TEMPORARY_PASSWORD_LENGTH = 16

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits \
    + '!@#$%^&*()-_=+'
"""Characters allowed in temporary passwords (76 of them)."""

# Largest multiple of len(ALPHABET) that fits in a byte; anything at or above
# it is rejected so every character is equally likely.
_REJECT_AT = 256 - 256 % len(ALPHABET)

Entropy = Callable[[int], bytes]
Password = Union[str, bytes]


class CredentialCodec(object):
    """
    Hashes passwords and generates salts, tokens and temporary passwords.

    Parameters
    ----------
    entropy : callable
        Returns ``n`` cryptographically secure random bytes. Defaults to
        :func:`secrets.token_bytes`; tests may substitute a deterministic
        source.
    time_cost : int
        Argon2 iterations.
    memory_cost : int
        Argon2 memory in KiB.
    parallelism : int
        Argon2 lanes.

    The Argon2 defaults (argon2id, 19 MiB, 2 iterations, 1 lane) are the ones
    existing password hashes were produced with; changing them invalidates
    every stored credential.
    """

    def __init__(self, entropy: Entropy = secrets.token_bytes,
                 time_cost: int = 2, memory_cost: int = 19456,
                 parallelism: int = 1) -> None:
        self._entropy = entropy
        self._time_cost = time_cost
        self._memory_cost = memory_cost
        self._parallelism = parallelism

    def hash_password(self, password: Password, salt: bytes) -> bytes:
        """
        Compute the 32-byte hash of a password with a salt.

        The same password and salt always produce the same hash.

        Raises
        ------
        :class:`.CredentialError`
            Raised if Argon2 rejects the inputs or parameters.

        """
        if isinstance(password, str):
            password = password.encode('utf-8')
        try:
            return hash_secret_raw(password, salt,
                                   time_cost=self._time_cost,
                                   memory_cost=self._memory_cost,
                                   parallelism=self._parallelism,
                                   hash_len=HASH_LENGTH,
                                   type=Type.ID)
        except HashingError as e:
            raise CredentialError(f'Could not hash password: {e}') from e

    def random_salt(self) -> bytes:
        """Generate a fresh 16-byte salt."""
        return self._random_bytes(SALT_LENGTH)

    def random_session_token(self) -> SessionToken:
        """Generate a fresh 256-bit session token."""
        return SessionToken(self._random_bytes(TOKEN_LENGTH))

    def random_temporary_password(
            self, length: int = TEMPORARY_PASSWORD_LENGTH) -> str:
        """
        Generate a random password from :data:`ALPHABET`.

        Every character is drawn independently and uniformly, using a fresh
        random byte for each attempt.
        """
        if length < 0:
            raise ValueError('Password length must not be negative')
        chars = []
        while len(chars) < length:
            byte = self._random_bytes(1)[0]
            if byte < _REJECT_AT:
                chars.append(ALPHABET[byte % len(ALPHABET)])
        return ''.join(chars)

    def new_credential(self, password: Password) -> Credential:
        """Hash ``password`` with a fresh salt."""
        salt = self.random_salt()
        return Credential(hash=self.hash_password(password, salt), salt=salt)

    def verify(self, password: Password, credential: Credential) -> bool:
        """Check a password against stored credential material."""
        check = self.hash_password(password, credential.salt)
        return hmac.compare_digest(check, credential.hash)

    def _random_bytes(self, n: int) -> bytes:
        try:
            data = self._entropy(n)
        except OSError as e:
            logger.error('Entropy source failed: %s', e)
            raise CredentialError('Entropy source unavailable') from e
        if len(data) != n:
            raise CredentialError(f'Expected {n} random bytes, got {len(data)}')
        return data
