"""Data Access Object (DAO) implementation for storing Records in Redis

This module provides a Redis-based implementation of RecordBaseDAO, for
deployments where several processes share one remote store.

Key layout (see RedisKeySchema):
    <prefix>:records:<id>      -> Record JSON
    <prefix>:records:counter   -> sequence counter (INCR)
    <prefix>:records:index     -> sorted set of ids, all scores 0 (lexicographic order)

Responsibilities:
    - Assign identifiers from an atomically incremented counter;
    - Insert, update, retrieve and delete Records together with their index entry;
    - Scan Records in key order;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    RecordRedisDAO:
        DAO for storing and retrieving Records in a Redis datastore.

Example:
    >>> dao = RecordRedisDAO(redis_host='localhost', prefix='shorty:dev')
    >>> record = dao.put(generator, Record(url='https://example.com/page'))
    >>> dao.get(str(record.id)).url
    'https://example.com/page'
"""

import dataclasses
import logging

from beartype import beartype

from shorty.models import Record
from shorty.constants import UINT32_MAX
from shorty.dao.base import RecordBaseDAO, IdentifierGenerator, RecordVisitor
from shorty.dao.helpers import require_open, dump_record, load_record
from shorty.dao.redis.mixins import RedisClientMixin
from shorty.dao.redis.helpers import handle_redis_connection_error
from shorty.dao.exceptions import RecordNotFoundError


logger = logging.getLogger(__name__)

# Number of records fetched per MGET during a scan
SCAN_BATCH_SIZE = 500


class RecordRedisDAO(RedisClientMixin, RecordBaseDAO):
    """Redis-based Data Access Object (DAO) for Records

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
    """

    @require_open
    @handle_redis_connection_error
    @beartype
    def get(self, key: str) -> Record:
        payload = self.redis.get(self.keys.record_key(key))
        if payload is None:
            raise RecordNotFoundError(f"Record with id '{key}' not found.")
        return load_record(key, payload)

    @require_open
    @handle_redis_connection_error
    @beartype
    def put(self, generator: IdentifierGenerator, record: Record) -> Record:
        """Insert or update a Record

        INCR hands out every counter value exactly once, so concurrent writers
        (even in different processes) never share a counter value. The record
        and its index entry are then written in one MULTI/EXEC transaction.

        NOTE: if the generator or the write fails after INCR, that counter value
              is skipped. Counter values stay unique, they are just not contiguous.
        """
        if record.id.valid:
            identifier = record.id
        else:
            counter = (self.redis.incr(self.keys.counter_key()) - 1) & UINT32_MAX
            identifier = generator(counter)

        key = str(identifier)
        payload = dump_record(dataclasses.replace(record, id=identifier))
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self.keys.record_key(key), payload)
            pipe.zadd(self.keys.index_key(), {key: 0})
            pipe.execute()

        record.id = identifier
        return record

    @require_open
    @handle_redis_connection_error
    @beartype
    def delete(self, *keys: str) -> int:
        if not keys:
            return 0

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(*self.keys.record_keys(keys))
            pipe.zrem(self.keys.index_key(), *keys)
            removed, _ = pipe.execute()
        return removed

    @require_open
    @handle_redis_connection_error
    @beartype
    def for_each(self, visitor: RecordVisitor) -> None:
        # Members sharing a score are returned in lexicographic order
        members = [_as_str(member) for member in self.redis.zrange(self.keys.index_key(), 0, -1)]

        for start in range(0, len(members), SCAN_BATCH_SIZE):
            batch = members[start : start + SCAN_BATCH_SIZE]
            payloads = self.redis.mget(self.keys.record_keys(batch))
            for key, payload in zip(batch, payloads):
                if payload is None:  # deleted since the index was read
                    continue
                visitor(key, load_record(key, payload))


def _as_str(value: str | bytes) -> str:
    return value.decode('utf-8') if isinstance(value, bytes) else value
