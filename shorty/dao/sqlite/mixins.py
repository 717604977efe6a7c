"""SQLite mixin providing shared connection setup, transactions and connectivity checks.

Responsibilities:
    - Open (or adopt) a SQLite connection usable from multiple threads
    - Serialize access to the shared connection
    - Run statements inside IMMEDIATE transactions
    - Healthcheck the database

Classes:
    - SQLiteConnectionMixin: Base mixin to inject connection setup, transactions & healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class RecordSQLiteDAO(SQLiteConnectionMixin, RecordBaseDAO):
        ...     pass
        ...
        >>> dao = RecordSQLiteDAO(db_path='shorty.db')
        >>> dao._healthcheck()
        True
"""

import logging
import sqlite3
import threading
import contextlib
from collections.abc import Iterator
from typing import Optional

from shorty.dao.exceptions import DataStoreError


logger = logging.getLogger(__name__)


class SQLiteConnectionMixin:
    """Mixin SQLite connection setup and health check for SQLite-backed DAOs.

    Attributes:
        connection (sqlite3.Connection):
            Connection used by subclasses. Only touch it while holding `lock`.

        db_path (str):
            Database location, for error messages.

        owns_connection (bool):
            True if the DAO opened the connection itself and must close it.

        closed (bool):
            True once close() has been called.

    Methods:
        transaction() -> ContextManager[sqlite3.Connection]:
            Hold the lock and run the block inside BEGIN IMMEDIATE ... COMMIT.

        _healthcheck(raise_error: bool = True) -> bool:
            Run a trivial query to verify the database is usable.
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        connection: Optional[sqlite3.Connection] = None,
        timeout: Optional[float] = 5.0,
    ):
        """Initialize a SQLite-based DAO

        The option is given to either use an existing connection or open one
        from a database path.

        Args:
            db_path (Optional[str]):
                Path of the database file. Ignored when `connection` is given.

            connection (Optional[sqlite3.Connection]):
                Pre-opened connection. The caller keeps ownership and closes it.

            timeout (Optional[float]):
                Seconds to wait on a locked database before failing. Defaults to 5.

        Raises:
            ValueError:
                If neither `db_path` nor `connection` is provided.

            DataStoreError:
                If the database cannot be opened or the healthcheck fails.
        """
        if connection is None:
            if db_path is None:
                raise ValueError('Either db_path or connection must be provided.')
            try:
                # isolation_level=None: transactions are managed explicitly
                connection = sqlite3.connect(db_path, timeout=timeout, isolation_level=None, check_same_thread=False)
            except sqlite3.Error as e:
                raise DataStoreError(f"Can't open SQLite database at '{db_path}'.") from e
            self.owns_connection = True
        else:
            self.owns_connection = False

        self.connection = connection
        self.db_path = db_path or ':connection:'
        self.lock = threading.RLock()
        self.closed = False

        self._healthcheck()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block of statements as one IMMEDIATE transaction.

        BEGIN IMMEDIATE takes the database write lock up front, so concurrent
        writers (threads or processes) are serialized before they read the counter.
        A failed COMMIT (e.g. a reader still holds SHARED) is rolled back too, so
        the connection never stays inside a half-done transaction.
        """
        with self.lock:
            self.connection.execute('BEGIN IMMEDIATE')
            try:
                yield self.connection
                self.connection.commit()
            except BaseException:
                if self.connection.in_transaction:
                    self.connection.rollback()
                raise

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """Run SELECT 1 to healthcheck the database

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if the database is usable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If the database cannot be queried and raise_error=True.
        """
        try:
            with self.lock:
                self.connection.execute('SELECT 1').fetchone()
        except sqlite3.Error as e:
            if raise_error:
                raise DataStoreError(f"Can't query SQLite database at '{self.db_path}'.") from e
            return False  # pragma: no cover
        else:
            return True

    def close(self) -> None:
        """Close the connection if this DAO opened it."""
        with self.lock:
            if self.closed:
                return
            self.closed = True
            if self.owns_connection:
                self.connection.close()
        logger.debug('Closed SQLite store.', extra={'dbPath': self.db_path, 'ownsConnection': self.owns_connection})
