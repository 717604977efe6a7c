import functools
from typing import Any
from collections.abc import Callable

import redis

from shorty.dao.exceptions import DataStoreError


__all__ = []

# Errors meaning "the server could not be reached", as opposed to command errors
UNREACHABLE_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def redis_location(client: redis.Redis) -> str:
    """Return 'host:port/db' for a client, for error messages."""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Turn Redis connectivity failures in a DAO method into DataStoreError

    Command errors (e.g. WRONGTYPE) are not connectivity failures and
    propagate unchanged.

    Example:
        >>> @handle_redis_connection_error
        ... def count(self):
        ...     return self.redis.zcard(self.keys.index_key())
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except UNREACHABLE_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e

    return wrapper
