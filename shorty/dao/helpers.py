import json
import functools
from typing import Any
from collections.abc import Callable

from shorty.models import Record
from shorty.exceptions import MalformedIdentifierError
from shorty.dao.exceptions import SerializationError, StoreClosedError


__all__ = ['require_open', 'dump_record', 'load_record']


def require_open[F: Callable[..., Any]](method: F) -> F:
    """Wrap DAO methods to refuse work once the DAO has been closed

    Args:
        method (Callable[..., Any]):
            DAO method. The DAO must expose a boolean `closed` attribute.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises StoreClosedError on a closed DAO.

    Example:
        >>> @require_open
        ... def get(self, key):
        ...     return self.records[key]
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self.closed:
            raise StoreClosedError(f'{type(self).__name__} is already closed.')
        return method(self, *args, **kwargs)

    return wrapper


def dump_record(record: Record) -> bytes:
    """Serialize a Record to JSON bytes. Raises SerializationError."""
    try:
        return record.to_json().encode('utf-8')
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Can't serialize record '{record.id}': {e}") from e


def load_record(key: str, payload: bytes | str) -> Record:
    """Deserialize a Record stored under key. Raises SerializationError."""
    try:
        return Record.from_json(payload)
    except (json.JSONDecodeError, MalformedIdentifierError, TypeError, ValueError) as e:
        raise SerializationError(f"Can't deserialize record '{key}': {e}") from e
