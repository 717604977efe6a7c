"""Data Access Object (DAO) implementation for storing Records in a single SQLite file

All data lives in one key/value table ("bucket"). Records are stored as JSON
under the text form of their identifier, next to the reserved key `_counter_`
which holds the sequence counter as a 4-byte big-endian integer.

Responsibilities:
    - Insert, update and retrieve Records;
    - Advance the persisted counter and assign identifiers in the same transaction;
    - Batch-delete and scan Records in key order, hiding reserved keys;
    - Translate sqlite3 errors into DAO exceptions.

Classes:
    RecordSQLiteDAO:
        DAO for storing and retrieving Records in a SQLite database file.

Example:
    >>> dao = RecordSQLiteDAO(db_path='/var/lib/shorty/shorty.db')
    >>> record = dao.put(generator, Record(url='https://example.com/page'))
    >>> dao.get(str(record.id)).url
    'https://example.com/page'
"""

import struct
import dataclasses
import logging

from beartype import beartype

from shorty.models import Record
from shorty.dao.base import RecordBaseDAO, IdentifierGenerator, RecordVisitor
from shorty.dao.helpers import require_open, dump_record, load_record
from shorty.dao.sqlite.mixins import SQLiteConnectionMixin
from shorty.dao.sqlite.helpers import handle_sqlite_error
from shorty.dao.exceptions import RecordNotFoundError


logger = logging.getLogger(__name__)

COUNTER_KEY = '_counter_'
# Keys starting with this prefix are bookkeeping, never records
RESERVED_PREFIX = '_'

COUNTER_FORMAT = struct.Struct('>I')


class RecordSQLiteDAO(SQLiteConnectionMixin, RecordBaseDAO):
    """SQLite-based Data Access Object (DAO) with a single key/value bucket

    Attributes (see SQLiteConnectionMixin):
        connection (sqlite3.Connection):
            Connection to the database file.
        bucket (str):
            Name of the key/value table. Defaults to 'shorty'.

    NOTE:
        close() is a no-op when the connection was supplied by the caller.
    """

    def __init__(self, *args, bucket: str = 'shorty', **kwargs):
        super().__init__(*args, **kwargs)
        if not bucket.isidentifier():
            raise ValueError(f'Bucket name must be a valid identifier (given value: {bucket!r}).')
        self.bucket = bucket
        self._create_bucket()

    @handle_sqlite_error
    def _create_bucket(self) -> None:
        with self.transaction() as con:
            con.execute(f'CREATE TABLE IF NOT EXISTS {self.bucket} (key TEXT PRIMARY KEY, value BLOB NOT NULL)')

    @require_open
    @handle_sqlite_error
    @beartype
    def get(self, key: str) -> Record:
        with self.lock:
            row = self.connection.execute(f'SELECT value FROM {self.bucket} WHERE key = ?', (key,)).fetchone()
        if row is None or key.startswith(RESERVED_PREFIX):
            raise RecordNotFoundError(f"Record with id '{key}' not found.")
        return load_record(key, row[0])

    @require_open
    @handle_sqlite_error
    @beartype
    def put(self, generator: IdentifierGenerator, record: Record) -> Record:
        """Insert or update a Record

        Reading the counter, writing it back, generating the identifier and
        writing the record all happen inside one BEGIN IMMEDIATE transaction.
        If anything fails the transaction is rolled back and record.id is left
        untouched.
        """
        with self.transaction() as con:
            if record.id.valid:
                identifier = record.id
            else:
                counter = self._increment_counter(con)
                identifier = generator(counter)
            con.execute(
                f'INSERT OR REPLACE INTO {self.bucket} (key, value) VALUES (?, ?)',
                (str(identifier), dump_record(dataclasses.replace(record, id=identifier))),
            )
        record.id = identifier
        return record

    @require_open
    @handle_sqlite_error
    @beartype
    def delete(self, *keys: str) -> int:
        removed = 0
        with self.transaction() as con:
            for key in keys:
                if key.startswith(RESERVED_PREFIX):
                    continue
                removed += con.execute(f'DELETE FROM {self.bucket} WHERE key = ?', (key,)).rowcount
        return removed

    @require_open
    @handle_sqlite_error
    @beartype
    def for_each(self, visitor: RecordVisitor) -> None:
        # Read a consistent snapshot, then visit outside the lock so the
        # visitor may call back into the DAO.
        with self.lock:
            rows = self.connection.execute(
                f'SELECT key, value FROM {self.bucket} WHERE substr(key, 1, 1) != ? ORDER BY key',
                (RESERVED_PREFIX,),
            ).fetchall()

        for key, value in rows:
            visitor(key, load_record(key, value))

    def _increment_counter(self, con) -> int:
        """Advance the persisted counter, returning its previous value."""
        row = con.execute(f'SELECT value FROM {self.bucket} WHERE key = ?', (COUNTER_KEY,)).fetchone()
        counter = COUNTER_FORMAT.unpack(row[0])[0] if row is not None and len(row[0]) == COUNTER_FORMAT.size else 0
        con.execute(
            f'INSERT OR REPLACE INTO {self.bucket} (key, value) VALUES (?, ?)',
            (COUNTER_KEY, COUNTER_FORMAT.pack(self.next_counter(counter))),
        )
        return counter
