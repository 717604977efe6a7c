import pytest
from cryptography.fernet import Fernet

from shorty.constants import EPOCH
from shorty.models import Identifier
from shorty.dao.memory import RecordMemoryDAO
from shorty.dao.sqlite import RecordSQLiteDAO, RecordVaultDAO


ORIGIN_TAG = 0x1337
CREATED = EPOCH + 300_000_000


class CountingGenerator:
    """Identifier generator which remembers every counter value it was given."""

    def __init__(self, origin_tag=ORIGIN_TAG, timestamp=CREATED):
        self.origin_tag = origin_tag
        self.timestamp = timestamp
        self.counters = []

    def __call__(self, counter):
        self.counters.append(counter)
        return Identifier.new(self.origin_tag, self.timestamp, counter)


@pytest.fixture
def generator():
    return CountingGenerator()


@pytest.fixture(scope='session')
def encryption_key():
    return Fernet.generate_key()


@pytest.fixture(params=['memory', 'sqlite', 'vault', 'vault-encrypted'])
def make_dao(request, tmp_path, encryption_key):
    """Factory opening (or re-opening) the same store for the parametrized backend."""
    opened = []

    def _make():
        match request.param:
            case 'memory':
                dao = RecordMemoryDAO()
            case 'sqlite':
                dao = RecordSQLiteDAO(db_path=str(tmp_path / 'shorty.db'))
            case 'vault':
                dao = RecordVaultDAO(db_path=str(tmp_path / 'vault.db'))
            case 'vault-encrypted':
                dao = RecordVaultDAO(db_path=str(tmp_path / 'vault.db'), encryption_key=encryption_key)
        opened.append(dao)
        return dao

    _make.backend = request.param
    yield _make

    for dao in opened:
        dao.close()


@pytest.fixture
def dao(make_dao):
    return make_dao()
