"""Backend selection for Record DAOs

Centralizes the mapping from a backend name to a RecordBaseDAO implementation,
so the facade and its callers stay ignorant of where data lives.

Backends:
    memory  -> RecordMemoryDAO()
    sqlite  -> RecordSQLiteDAO(db_path=..., bucket=...)
    vault   -> RecordVaultDAO(db_path=..., encryption_key=...)
    redis   -> RecordRedisDAO(redis_host=..., redis_port=..., prefix=..., ...)

Example:
    >>> dao = open_dao('sqlite', db_path='shorty.db')
    >>> type(dao).__name__
    'RecordSQLiteDAO'
"""

import logging
from typing import Any

from shorty.dao.base import RecordBaseDAO
from shorty.dao.memory import RecordMemoryDAO
from shorty.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

BACKENDS = ('memory', 'sqlite', 'vault', 'redis')


def open_dao(backend: str = 'memory', **options: Any) -> RecordBaseDAO:
    """Instantiate the DAO for the given backend name

    Args:
        backend (str):
            One of BACKENDS (case-insensitive). Defaults to 'memory'.
        **options:
            Keyword arguments passed to the backend constructor.

    Returns:
        RecordBaseDAO: a ready-to-use DAO.

    Raises:
        BadConfigurationError:
            If the backend name is unknown or a required option is missing.
        DataStoreError:
            If the backend cannot reach its data store.
    """
    name = backend.strip().lower()
    logger.debug('Opening record store.', extra={'backend': name, 'options': sorted(options)})

    if name == 'memory':
        return RecordMemoryDAO()

    if name in ('sqlite', 'vault'):
        if not options.get('db_path') and not options.get('connection'):
            raise BadConfigurationError(f"Backend '{name}' requires a 'db_path' option.")
        # Local imports to avoid hard dependencies for backends which aren't used
        if name == 'sqlite':
            from shorty.dao.sqlite import RecordSQLiteDAO

            return RecordSQLiteDAO(**options)

        from shorty.dao.sqlite import RecordVaultDAO

        return RecordVaultDAO(**options)

    if name == 'redis':
        from shorty.dao.redis import RecordRedisDAO

        return RecordRedisDAO(**options)

    raise BadConfigurationError(f'Unknown storage backend: {backend!r} (expected one of {", ".join(BACKENDS)}).')
