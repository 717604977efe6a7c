import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # prefix_key is internal


# Every key the record store touches lives below this namespace
NAMESPACE = 'records'


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        return self.qualify(func(self, *args, **kwargs))

    return wrapper


class RedisKeySchema:
    """Name the Redis keys of a record store.

    Layout, below an optional prefix such as "shorty:prod":
        records:<id>       record JSON
        records:counter    sequence counter
        records:index      sorted set of ids (all scores 0)

    An identifier's text form always holds two '0' separators, so no record
    key can shadow 'records:counter' or 'records:index'.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    def qualify(self, key: str) -> str:
        return key if self.prefix is None else f'{self.prefix}:{key}'

    @prefix_key
    def record_key(self, key: str) -> str:
        return f'{NAMESPACE}:{key}'

    def record_keys(self, keys) -> list[str]:
        return [self.record_key(key) for key in keys]

    @prefix_key
    def counter_key(self) -> str:
        return f'{NAMESPACE}:counter'

    @prefix_key
    def index_key(self) -> str:
        return f'{NAMESPACE}:index'
