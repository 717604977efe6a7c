"""Volatile, in-memory Record DAO

Records live in a dict guarded by a single lock; the counter is a plain
integer. Everything is lost when the process exits. Useful for tests and
single-process deployments that do not need durability.

Classes:
    RecordMemoryDAO:
        In-memory implementation of RecordBaseDAO.
"""

import dataclasses
import logging
import threading

from beartype import beartype

from shorty.models import Record
from shorty.dao.base import RecordBaseDAO, IdentifierGenerator, RecordVisitor
from shorty.dao.helpers import require_open, dump_record, load_record
from shorty.dao.exceptions import RecordNotFoundError


logger = logging.getLogger(__name__)


class RecordMemoryDAO(RecordBaseDAO):
    """In-memory Record DAO.

    Records are kept as the same JSON payload the persistent stores write, so
    unserializable metadata is refused here too and callers always get back a
    fresh copy.

    Example:
        >>> dao = RecordMemoryDAO()
        >>> dao.put(generator, Record(url='https://example.com'))
        Record(url='https://example.com', ...)
        >>> dao.counter
        1
    """

    def __init__(self):
        self.records: dict[str, bytes] = {}
        self.counter = 0
        self.closed = False
        self._lock = threading.Lock()

    @require_open
    @beartype
    def get(self, key: str) -> Record:
        with self._lock:
            payload = self.records.get(key)
        if payload is None:
            raise RecordNotFoundError(f"Record with id '{key}' not found.")
        return load_record(key, payload)

    @require_open
    @beartype
    def put(self, generator: IdentifierGenerator, record: Record) -> Record:
        with self._lock:
            fresh = not record.id.valid
            identifier = generator(self.counter) if fresh else record.id
            payload = dump_record(dataclasses.replace(record, id=identifier))
            if fresh:
                self.counter = self.next_counter(self.counter)
            self.records[str(identifier)] = payload
        record.id = identifier
        return record

    @require_open
    @beartype
    def delete(self, *keys: str) -> int:
        removed = 0
        with self._lock:
            for key in keys:
                if self.records.pop(key, None) is not None:
                    removed += 1
        return removed

    @require_open
    @beartype
    def for_each(self, visitor: RecordVisitor) -> None:
        # Snapshot the keys, then visit without holding the lock so the
        # visitor may call back into the DAO.
        with self._lock:
            keys = sorted(self.records)

        for key in keys:
            with self._lock:
                payload = self.records.get(key)
            if payload is None:  # deleted since the snapshot
                continue
            visitor(key, load_record(key, payload))

    def close(self) -> None:
        with self._lock:
            self.closed = True
            self.records.clear()
        logger.debug('Closed in-memory store.')
