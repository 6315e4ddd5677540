"""Configuration for the account authority, read from the environment."""

import os

ACCOUNTS_DATABASE_URI = os.environ.get('ACCOUNTS_DATABASE_URI',
                                       'sqlite:///accounts.db')
"""SQLAlchemy URL of the account database."""

SESSION_BACKEND = os.environ.get('SESSION_BACKEND', 'database')
"""Where sessions live: ``database`` or ``redis``."""

REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')
REDIS_TOKEN = os.environ.get('REDIS_TOKEN', None)

SESSION_DURATION = os.environ.get('SESSION_DURATION', '0')
"""Redis session lifetime in seconds; ``0`` means sessions never expire."""

TEMPORARY_PASSWORD_LENGTH = os.environ.get('TEMPORARY_PASSWORD_LENGTH', '16')

ARGON2_TIME_COST = os.environ.get('ARGON2_TIME_COST', '2')
ARGON2_MEMORY_COST = os.environ.get('ARGON2_MEMORY_COST', '19456')
ARGON2_PARALLELISM = os.environ.get('ARGON2_PARALLELISM', '1')

LOGLEVEL = os.environ.get('LOGLEVEL', 'INFO')
LOG_JSON = os.environ.get('LOG_JSON', '1')
