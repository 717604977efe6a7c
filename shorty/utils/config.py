"""Utility functions for application configuration management.

Configuration comes from environment variables, optionally overridden by a
JSON document referenced by `SHORTY_CONFIG_FILE`. The document follows this
structure:

    {
        "active_backend": "sqlite",
        "origin_tag": 4919,
        "purge_interval": 3600,
        "backends": {
            "sqlite": {"db_path": "/var/lib/shorty/shorty.db"},
            "redis": {"redis_host": "localhost", "prefix": "shorty:prod"}
        }
    }

Only the section of the active backend is handed to the storage factory.

Functions:
    app_env() -> str
        Return the current application environment (`SHORTY_ENV`), defaulting to 'local'.

    origin_tag() -> int
        Return the configured origin tag, or derive one from the host name.

    purge_interval() -> float
        Return the delay between two reclamation sweeps in seconds.

    load_config() -> dict
        Return {"backend": <name>, "options": {...}, "origin_tag": int, "purge_interval": float}.

Example:
    >>> os.environ['SHORTY_BACKEND'] = 'sqlite'
    >>> os.environ['SHORTY_DB_PATH'] = '/tmp/shorty.db'
    >>> load_config()['options']
    {'db_path': '/tmp/shorty.db'}
"""

import os
import json
import socket
import logging
from pathlib import Path
from typing import Any

import xxhash

from shorty.constants import ENV, Interval, UINT32_MAX
from shorty.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'SHORTY_ENV'

    Returns:
        str:
            Value of `SHORTY_ENV` environment variable, `'local'` by default.
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def _int_env(name: str, default: int | None = None) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw, 0)
    except ValueError as e:
        raise BadConfigurationError(f'{name} must be an integer (given value: {raw!r}).') from e


def origin_tag() -> int:
    """Return the origin tag embedded in generated identifiers

    Reads `SHORTY_ORIGIN_TAG` (decimal or 0x-prefixed hex). When unset, the tag
    is the 32-bit xxhash digest of the host name, so processes on different
    hosts get different tags without any coordination.

    Raises:
        BadConfigurationError: if the configured tag is not a 32-bit unsigned integer.

    Example:
        >>> os.environ['SHORTY_ORIGIN_TAG'] = '0x1337'
        >>> origin_tag()
        4919
    """
    tag = _int_env(ENV.App.ORIGIN_TAG)
    if tag is None:
        return xxhash.xxh32_intdigest(socket.gethostname())
    if not 0 <= tag <= UINT32_MAX:
        raise BadConfigurationError(f'{ENV.App.ORIGIN_TAG} must fit in 32 unsigned bits (given value: {tag}).')
    return tag


def purge_interval() -> float:
    """Return the reclamation interval in seconds (`SHORTY_PURGE_INTERVAL`, default 1 hour)."""
    interval = _int_env(ENV.App.PURGE_INTERVAL, Interval.PURGE)
    if interval <= 0:
        raise BadConfigurationError(f'{ENV.App.PURGE_INTERVAL} must be positive (given value: {interval}).')
    return float(interval)


def _backend_options_from_env(backend: str) -> dict[str, Any]:
    if backend in ('sqlite', 'vault'):
        options: dict[str, Any] = {}
        if db_path := os.environ.get(ENV.Store.DB_PATH):
            options['db_path'] = db_path
        if backend == 'vault' and (key := os.environ.get(ENV.Store.ENCRYPTION_KEY)):
            options['encryption_key'] = key
        return options

    if backend == 'redis':
        options = {
            'redis_host': os.environ.get(ENV.Redis.HOST, 'localhost'),
            'redis_port': _int_env(ENV.Redis.PORT, 6379),
            'redis_db': _int_env(ENV.Redis.DB, 0),
        }
        if prefix := os.environ.get(ENV.Redis.PREFIX):
            options['prefix'] = prefix
        return options

    return {}


def _load_config_file(path: Path) -> dict[str, Any]:
    logger.debug('Trying to load configuration file.', extra={'configFile': str(path)})
    try:
        with path.open('r', encoding='utf-8') as f:
            document = json.load(f)
    except FileNotFoundError as e:
        raise BadConfigurationError(f'Configuration file {str(path)!r} does not exist.') from e
    except json.JSONDecodeError as e:
        raise BadConfigurationError(f'Configuration file {str(path)!r} is not valid JSON: {e}') from e

    if not isinstance(document, dict) or 'active_backend' not in document:
        raise BadConfigurationError(f"Configuration file {str(path)!r} must define 'active_backend'.")
    return document


def load_config() -> dict[str, Any]:
    """Load the runtime configuration

    Environment variables provide the defaults; a configuration file named by
    `SHORTY_CONFIG_FILE` takes precedence for every key it defines.

    Returns:
        dict: {
            "backend": str,            # storage backend name
            "options": dict,           # keyword arguments for open_dao()
            "origin_tag": int,
            "purge_interval": float,
        }

    Raises:
        BadConfigurationError:
            If a value is malformed or the configuration file is unusable.
    """
    backend = os.environ.get(ENV.Store.BACKEND, 'memory').strip().lower()
    config = {
        'backend': backend,
        'options': _backend_options_from_env(backend),
        'origin_tag': None,
        'purge_interval': None,
    }

    if config_file := os.environ.get(ENV.App.CONFIG_FILE):
        document = _load_config_file(Path(config_file))
        backend = str(document['active_backend']).strip().lower()
        config['backend'] = backend
        config['options'] = dict(document.get('backends', {}).get(backend, {}))
        config['origin_tag'] = document.get('origin_tag')
        config['purge_interval'] = document.get('purge_interval')

    if config['origin_tag'] is None:
        config['origin_tag'] = origin_tag()
    elif not isinstance(config['origin_tag'], int) or not 0 <= config['origin_tag'] <= UINT32_MAX:
        raise BadConfigurationError(f"'origin_tag' must fit in 32 unsigned bits (given value: {config['origin_tag']!r}).")
    if config['purge_interval'] is None:
        config['purge_interval'] = purge_interval()

    logger.debug('Loaded configuration.', extra={'backend': config['backend'], 'env': app_env()})
    return config
