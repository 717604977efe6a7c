from shorty.dao.sqlite.mixins import SQLiteConnectionMixin
from shorty.dao.sqlite.middleware import PlainMiddleware, FernetMiddleware
from shorty.dao.sqlite.record_sqlite_dao import RecordSQLiteDAO
from shorty.dao.sqlite.record_vault_dao import RecordVaultDAO


__all__ = [
    'SQLiteConnectionMixin',
    'PlainMiddleware',
    'FernetMiddleware',
    'RecordSQLiteDAO',
    'RecordVaultDAO',
]
