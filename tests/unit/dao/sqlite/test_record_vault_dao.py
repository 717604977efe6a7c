"""Unit tests for RecordVaultDAO specifics

Backend-independent behaviour is covered by tests/unit/dao/test_record_dao_contract.py.

Test coverage includes:

1. Storage layout
   - Records live in the 'ids' table, the counter in the 'counter' table as a JSON number.

2. Encryption at rest
   - With a key, neither records nor the counter are stored in plaintext.
   - Opening with the wrong key raises SerializationError on read and on insert.
"""

import json

import pytest
from cryptography.fernet import Fernet

from shorty.constants import EPOCH
from shorty.models import Identifier, Record
from shorty.dao.sqlite import RecordVaultDAO, PlainMiddleware, FernetMiddleware
from shorty.dao.sqlite.record_vault_dao import IDS_TABLE, COUNTER_TABLE, COUNTER_KEY
from shorty.dao.exceptions import SerializationError


def generator(counter):
    return Identifier.new(0x1337, EPOCH + 1000, counter)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / 'vault.db')


def _raw(dao, table, key):
    row = dao.connection.execute(f'SELECT value FROM {table} WHERE key = ?', (key,)).fetchone()
    return row[0] if row else None


# -------------------------------
# 1. Storage layout
# -------------------------------


def test_plain_vault_layout(db_path):
    with RecordVaultDAO(db_path=db_path) as dao:
        assert isinstance(dao.middleware, PlainMiddleware)
        record = dao.put(generator, Record(url='https://example.com'))
        dao.put(generator, Record(url='https://example.org'))

        assert json.loads(_raw(dao, IDS_TABLE, str(record.id)))['url'] == 'https://example.com'
        assert json.loads(_raw(dao, COUNTER_TABLE, COUNTER_KEY)) == 2


def test_counter_table_is_never_scanned(db_path):
    with RecordVaultDAO(db_path=db_path) as dao:
        dao.put(generator, Record(url='https://example.com'))

        visited = []
        dao.for_each(lambda key, record: visited.append(key))
        assert visited == [str(generator(0))]


# -------------------------------
# 2. Encryption at rest
# -------------------------------


def test_encrypted_vault_hides_plaintext(db_path):
    key = Fernet.generate_key()
    with RecordVaultDAO(db_path=db_path, encryption_key=key) as dao:
        assert isinstance(dao.middleware, FernetMiddleware)
        record = dao.put(generator, Record(url='https://secret.example.com'))

        raw_record = _raw(dao, IDS_TABLE, str(record.id))
        raw_counter = _raw(dao, COUNTER_TABLE, COUNTER_KEY)

        assert b'secret.example.com' not in raw_record
        assert raw_counter != b'1'
        assert json.loads(Fernet(key).decrypt(raw_counter)) == 1
        assert dao.get(str(record.id)).url == 'https://secret.example.com'


def test_wrong_key_cannot_read(db_path):
    with RecordVaultDAO(db_path=db_path, encryption_key=Fernet.generate_key()) as dao:
        record = dao.put(generator, Record(url='https://example.com'))

    with RecordVaultDAO(db_path=db_path, encryption_key=Fernet.generate_key()) as dao:
        with pytest.raises(SerializationError):
            dao.get(str(record.id))
        with pytest.raises(SerializationError):
            dao.for_each(lambda key, r: None)
        with pytest.raises(SerializationError):
            dao.put(generator, Record(url='https://example.org'))


def test_plain_vault_cannot_read_encrypted_store(db_path):
    with RecordVaultDAO(db_path=db_path, encryption_key=Fernet.generate_key()) as dao:
        record = dao.put(generator, Record(url='https://example.com'))

    with RecordVaultDAO(db_path=db_path) as dao:
        with pytest.raises(SerializationError):
            dao.get(str(record.id))
