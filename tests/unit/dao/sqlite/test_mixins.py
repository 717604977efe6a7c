"""Unit tests for SQLiteConnectionMixin.

Test coverage includes:
    1. Initialization
       - Opens a connection from a path, or adopts a caller-supplied one.
       - Raises ValueError when neither is given and DataStoreError when the file can't be opened.
    2. Transactions
       - Commits on success, rolls back on error.
    3. Healthcheck and close
       - SELECT 1 healthcheck; close() only closes connections the mixin opened.
"""

import sqlite3

import pytest

from shorty.dao.sqlite.mixins import SQLiteConnectionMixin
from shorty.dao.exceptions import DataStoreError


class DummyDAO(SQLiteConnectionMixin):
    pass


# -------------------------------
# 1. Initialization
# -------------------------------


def test_init_opens_connection_from_path(tmp_path):
    db_path = str(tmp_path / 'dummy.db')
    dao = DummyDAO(db_path=db_path)

    assert isinstance(dao.connection, sqlite3.Connection)
    assert dao.owns_connection is True
    assert dao.db_path == db_path
    assert dao.closed is False
    assert dao.connection.isolation_level is None
    dao.close()


def test_init_adopts_existing_connection():
    connection = sqlite3.connect(':memory:', isolation_level=None)
    dao = DummyDAO(connection=connection)

    assert dao.connection is connection
    assert dao.owns_connection is False
    assert dao.db_path == ':connection:'
    connection.close()


def test_init_requires_path_or_connection():
    with pytest.raises(ValueError, match='Either db_path or connection must be provided.'):
        DummyDAO()


def test_init_unopenable_path(tmp_path):
    with pytest.raises(DataStoreError, match="Can't open SQLite database"):
        DummyDAO(db_path=str(tmp_path / 'missing-dir' / 'dummy.db'))


def test_init_fails_healthcheck_on_closed_connection():
    connection = sqlite3.connect(':memory:')
    connection.close()

    with pytest.raises(DataStoreError, match="Can't query SQLite database"):
        DummyDAO(connection=connection)


# -------------------------------
# 2. Transactions
# -------------------------------


@pytest.fixture
def dao(tmp_path):
    dao = DummyDAO(db_path=str(tmp_path / 'dummy.db'))
    dao.connection.execute('CREATE TABLE t (v INTEGER)')
    yield dao
    dao.close()


def _values(dao):
    return [row[0] for row in dao.connection.execute('SELECT v FROM t ORDER BY v')]


def test_transaction_commits(dao):
    with dao.transaction() as con:
        con.execute('INSERT INTO t VALUES (1)')
        con.execute('INSERT INTO t VALUES (2)')

    assert dao.connection.in_transaction is False
    assert _values(dao) == [1, 2]


def test_transaction_rolls_back_on_error(dao):
    with pytest.raises(RuntimeError):
        with dao.transaction() as con:
            con.execute('INSERT INTO t VALUES (1)')
            raise RuntimeError('abort')

    assert dao.connection.in_transaction is False
    assert _values(dao) == []


def test_transaction_is_visible_to_other_connections(dao):
    with dao.transaction() as con:
        con.execute('INSERT INTO t VALUES (7)')

    other = sqlite3.connect(dao.db_path)
    try:
        assert other.execute('SELECT v FROM t').fetchall() == [(7,)]
    finally:
        other.close()


# -------------------------------
# 3. Healthcheck and close
# -------------------------------


def test_healthcheck_success(dao):
    assert dao._healthcheck() is True


def test_healthcheck_failure_raises(dao):
    dao.connection.close()
    with pytest.raises(DataStoreError):
        dao._healthcheck()


def test_close_owned_connection(tmp_path):
    dao = DummyDAO(db_path=str(tmp_path / 'dummy.db'))
    dao.close()

    assert dao.closed is True
    with pytest.raises(sqlite3.ProgrammingError):
        dao.connection.execute('SELECT 1')


def test_close_leaves_borrowed_connection_open():
    connection = sqlite3.connect(':memory:')
    dao = DummyDAO(connection=connection)
    dao.close()
    dao.close()

    assert dao.closed is True
    assert connection.execute('SELECT 1').fetchone() == (1,)
    connection.close()
