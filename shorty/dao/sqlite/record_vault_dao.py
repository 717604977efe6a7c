"""Data Access Object (DAO) implementation for an optionally encrypted SQLite store

Records and the sequence counter live in two separate tables ("ids" and
"counter"), so no bookkeeping key can ever show up in a record scan. Every
stored value, counter included, passes through a value middleware; with a key
configured, values are encrypted at rest with Fernet.

Classes:
    RecordVaultDAO:
        DAO for storing and retrieving Records in an optionally encrypted SQLite database.

Example:
    >>> from cryptography.fernet import Fernet
    >>> key = Fernet.generate_key()
    >>> with RecordVaultDAO(db_path='/var/lib/shorty/vault.db', encryption_key=key) as dao:
    ...     record = dao.put(generator, Record(url='https://example.com/page'))
    ...     dao.get(str(record.id)).url
    'https://example.com/page'
"""

import json
import dataclasses
import logging
from typing import Optional

from beartype import beartype

from shorty.models import Record
from shorty.dao.base import RecordBaseDAO, IdentifierGenerator, RecordVisitor
from shorty.dao.helpers import require_open, dump_record, load_record
from shorty.dao.sqlite.mixins import SQLiteConnectionMixin
from shorty.dao.sqlite.helpers import handle_sqlite_error
from shorty.dao.sqlite.middleware import PlainMiddleware, FernetMiddleware
from shorty.dao.exceptions import RecordNotFoundError, SerializationError


logger = logging.getLogger(__name__)

IDS_TABLE = 'ids'
COUNTER_TABLE = 'counter'
COUNTER_KEY = 'cnt'


class RecordVaultDAO(SQLiteConnectionMixin, RecordBaseDAO):
    """SQLite-based Data Access Object (DAO) with value middleware

    Attributes (see SQLiteConnectionMixin):
        connection (sqlite3.Connection):
            Connection to the database file.
        middleware (PlainMiddleware | FernetMiddleware):
            Transform applied to every stored value.

    NOTE:
        The vault always owns its connection, close() closes it.
    """

    def __init__(self, db_path: str, encryption_key: Optional[bytes | str] = None, timeout: Optional[float] = 5.0):
        super().__init__(db_path=db_path, timeout=timeout)
        self.middleware = FernetMiddleware(encryption_key) if encryption_key else PlainMiddleware()
        self._create_tables()
        logger.debug('Opened vault store.', extra={'dbPath': db_path, 'encrypted': bool(encryption_key)})

    @handle_sqlite_error
    def _create_tables(self) -> None:
        with self.transaction() as con:
            for table in (COUNTER_TABLE, IDS_TABLE):
                con.execute(f'CREATE TABLE IF NOT EXISTS {table} (key TEXT PRIMARY KEY, value BLOB NOT NULL)')

    @require_open
    @handle_sqlite_error
    @beartype
    def get(self, key: str) -> Record:
        with self.lock:
            row = self.connection.execute(f'SELECT value FROM {IDS_TABLE} WHERE key = ?', (key,)).fetchone()
        if row is None:
            raise RecordNotFoundError(f"Record with id '{key}' not found.")
        return load_record(key, self.middleware.decode(row[0]))

    @require_open
    @handle_sqlite_error
    @beartype
    def put(self, generator: IdentifierGenerator, record: Record) -> Record:
        with self.transaction() as con:
            if record.id.valid:
                identifier = record.id
            else:
                identifier = generator(self._increment_counter(con))
            payload = self.middleware.encode(dump_record(dataclasses.replace(record, id=identifier)))
            con.execute(f'INSERT OR REPLACE INTO {IDS_TABLE} (key, value) VALUES (?, ?)', (str(identifier), payload))
        record.id = identifier
        return record

    @require_open
    @handle_sqlite_error
    @beartype
    def delete(self, *keys: str) -> int:
        removed = 0
        with self.transaction() as con:
            for key in keys:
                removed += con.execute(f'DELETE FROM {IDS_TABLE} WHERE key = ?', (key,)).rowcount
        return removed

    @require_open
    @handle_sqlite_error
    @beartype
    def for_each(self, visitor: RecordVisitor) -> None:
        with self.lock:
            rows = self.connection.execute(f'SELECT key, value FROM {IDS_TABLE} ORDER BY key').fetchall()

        for key, value in rows:
            visitor(key, load_record(key, self.middleware.decode(value)))

    def _increment_counter(self, con) -> int:
        """Advance the persisted counter, returning its previous value.

        The counter is stored as a JSON number, through the middleware.
        """
        row = con.execute(f'SELECT value FROM {COUNTER_TABLE} WHERE key = ?', (COUNTER_KEY,)).fetchone()
        counter = 0
        if row is not None:
            try:
                counter = int(json.loads(self.middleware.decode(row[0])))
            except (TypeError, ValueError) as e:
                raise SerializationError(f"Can't deserialize counter in '{self.db_path}': {e}") from e

        payload = self.middleware.encode(json.dumps(self.next_counter(counter)).encode('utf-8'))
        con.execute(f'INSERT OR REPLACE INTO {COUNTER_TABLE} (key, value) VALUES (?, ?)', (COUNTER_KEY, payload))
        return counter
