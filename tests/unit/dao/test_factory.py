"""Unit tests for open_dao() in factory.py

Test coverage includes:

1. Backend selection
   - Each backend name maps to its DAO class; names are case-insensitive.
   - Options are forwarded to the backend constructor.

2. Misconfiguration
   - Unknown backends and missing required options raise BadConfigurationError.
"""

import sqlite3
from unittest.mock import MagicMock, patch

import pytest
import redis

from shorty.dao import open_dao, BACKENDS, RecordMemoryDAO
from shorty.dao.sqlite import RecordSQLiteDAO, RecordVaultDAO
from shorty.dao.redis import RecordRedisDAO
from shorty.exceptions import BadConfigurationError


# -------------------------------
# 1. Backend selection
# -------------------------------


def test_backend_names():
    assert BACKENDS == ('memory', 'sqlite', 'vault', 'redis')


@pytest.mark.parametrize('name', ['memory', ' MEMORY ', 'Memory'])
def test_open_memory(name):
    dao = open_dao(name)
    assert isinstance(dao, RecordMemoryDAO)


def test_open_memory_by_default():
    assert isinstance(open_dao(), RecordMemoryDAO)


def test_open_sqlite(tmp_path):
    with open_dao('sqlite', db_path=str(tmp_path / 'shorty.db'), bucket='links') as dao:
        assert isinstance(dao, RecordSQLiteDAO)
        assert dao.bucket == 'links'


def test_open_sqlite_with_connection():
    connection = sqlite3.connect(':memory:', isolation_level=None, check_same_thread=False)
    with open_dao('sqlite', connection=connection) as dao:
        assert isinstance(dao, RecordSQLiteDAO)
        assert dao.owns_connection is False
    connection.close()


def test_open_vault(tmp_path):
    with open_dao('vault', db_path=str(tmp_path / 'vault.db')) as dao:
        assert isinstance(dao, RecordVaultDAO)


def test_open_redis():
    redis_client = MagicMock(spec=redis.Redis)
    redis_client.ping.return_value = True

    with open_dao('redis', redis_client=redis_client, prefix='shorty:test') as dao:
        assert isinstance(dao, RecordRedisDAO)
        assert dao.redis is redis_client
        assert dao.keys.prefix == 'shorty:test'


def test_open_redis_forwards_connection_options():
    with patch('shorty.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        open_dao('redis', redis_host='redis.internal', redis_port=6380, redis_db=3)

    redis_mock.assert_called_once_with(host='redis.internal', port=6380, db=3, decode_responses=True, username=None, password=None)


# -------------------------------
# 2. Misconfiguration
# -------------------------------


def test_unknown_backend():
    with pytest.raises(BadConfigurationError, match="Unknown storage backend: 'dynamodb'"):
        open_dao('dynamodb')


@pytest.mark.parametrize('name', ['sqlite', 'vault'])
def test_file_backends_require_db_path(name):
    with pytest.raises(BadConfigurationError, match=f"Backend '{name}' requires a 'db_path' option."):
        open_dao(name)
