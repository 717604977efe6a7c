import functools
import sqlite3
from typing import Any
from collections.abc import Callable

from shorty.dao.exceptions import DataStoreError


__all__ = []


def handle_sqlite_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap SQLite-interacting DAO methods to handle database errors

    Args:
        method (Callable[..., Any]):
            DAO method performing SQLite operations which may raise sqlite3.Error.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on database issues.

    Example:
        >>> @handle_sqlite_error
        ... def count(self):
        ...     return self.connection.execute('SELECT COUNT(*) FROM bucket').fetchone()[0]
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except sqlite3.Error as e:
            raise DataStoreError(f"SQLite error on '{self.db_path}': {e}") from e

    return wrapper
