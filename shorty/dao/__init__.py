from shorty.dao.base import RecordBaseDAO
from shorty.dao.memory import RecordMemoryDAO
from shorty.dao.factory import open_dao, BACKENDS


__all__ = [
    'RecordBaseDAO',
    'RecordMemoryDAO',
    'open_dao',
    'BACKENDS',
]
