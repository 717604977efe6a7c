from shorty.models import Identifier, Record
from shorty.shortener import Shorty, Reaper


__all__ = [
    'Identifier',
    'Record',
    'Shorty',
    'Reaper',
]
