"""Redis client plumbing shared by Redis-backed record stores

Responsibilities:
    - Build a client from connection parameters, or adopt a caller's client
    - Namespace keys through RedisKeySchema
    - Ping the server on start-up
    - Release the client on close(), but only when the store built it

Example:
    >>> class RecordRedisDAO(RedisClientMixin, RecordBaseDAO):
    ...     pass
    ...
    >>> dao = RecordRedisDAO(redis_host='cache.internal', prefix='shorty:prod')
    >>> dao.keys.counter_key()
    'shorty:prod:records:counter'
"""

import logging
from typing import Optional

import redis

from shorty.dao.redis.redis_key_schema import RedisKeySchema
from shorty.dao.redis.helpers import UNREACHABLE_ERRORS, redis_location
from shorty.dao.exceptions import DataStoreError


logger = logging.getLogger(__name__)


class RedisClientMixin:
    """Client setup, healthcheck and ownership-aware close for Redis stores.

    Attributes:
        redis (redis.Redis):
            Client used by the store.
        keys (RedisKeySchema):
            Key names, namespaced under `prefix`.
        owns_client (bool):
            False when the client was passed in; such a client outlives the store.
        closed (bool):
            True once close() has been called.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Connect to Redis, or adopt an existing client

        Args:
            redis_host, redis_port, redis_db (Optional[str | int]):
                Server location. Ports and db indexes given as strings (e.g.
                straight from the environment) are converted.
            redis_decode_responses (Optional[bool]):
                Return str instead of bytes. Defaults to True.
            redis_username, redis_password (Optional[str]):
                ACL credentials, if the server requires them.
            redis_client (Optional[redis.Redis]):
                Pre-built client. Connection parameters are ignored when given.
            prefix (Optional[str]):
                Key namespace, e.g. 'shorty:prod'.

        Raises:
            DataStoreError: if the server does not answer PING.
        """
        self.owns_client = redis_client is None
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
            )
        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        self.closed = False

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server.

        Returns False instead of raising DataStoreError when raise_error=False.
        """
        try:
            self.redis.ping()
        except UNREACHABLE_ERRORS as e:
            if not raise_error:
                return False
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}. Check the provided configuration parameters.") from e
        return True

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.owns_client:
            self.redis.close()
        logger.debug('Closed Redis store.', extra={'prefix': self.keys.prefix, 'ownsClient': self.owns_client})
