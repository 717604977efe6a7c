"""Data models for shortened URLs.

Classes:
    Identifier:
        Immutable (timestamp offset, origin tag, sequence counter) triple naming a record.
    Record:
        A stored URL mapping: identifier, target URL, optional max age and metadata.

Example:
    >>> from datetime import timedelta
    >>> record = Record(url='https://example.com', max_age=timedelta(hours=1))
    >>> record.id.valid
    False
    >>> record.id = Identifier.new(0x1337, 1_700_000_000, 0)
    >>> str(record.id)
    'pObko0btN0'
    >>> record.to_dict()
    {'id': 'pObko0btN0', 'url': 'https://example.com', 'maxAge': 3600.0}
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC
from typing import Any

from shorty.constants import EPOCH, UINT32_MAX
from shorty.utils.codec import encode_identifier, decode_identifier


# fmt: off
@dataclass(frozen=True, order=True)
class Identifier:
    timestamp_offset: int = 0  # Seconds since EPOCH, 0 means invalid
    origin_tag: int = 0        # Opaque id of the generating process/node
    sequence_counter: int = 0  # Backend-assigned counter value
# fmt: on

    def __post_init__(self):
        for name in ('timestamp_offset', 'origin_tag', 'sequence_counter'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f'{name} must be of type integer (given type: {type(value)}).')
            if not 0 <= value <= UINT32_MAX:
                raise ValueError(f'{name} must fit in 32 unsigned bits (given value: {value}).')

    @classmethod
    def new(cls, origin_tag: int, timestamp: int | float | datetime, sequence_counter: int) -> 'Identifier':
        """Build an identifier from an absolute creation time.

        Args:
            origin_tag (int):
                Origin tag of the generating process.
            timestamp (int | float | datetime):
                Unix timestamp or aware datetime. Must be after EPOCH.
            sequence_counter (int):
                Counter value supplied by the storage backend.

        Example:
            >>> Identifier.new(0xB00F, 1_483_228_801, 1)
            Identifier(timestamp_offset=1, origin_tag=45071, sequence_counter=1)
        """
        if isinstance(timestamp, datetime):
            timestamp = timestamp.timestamp()
        return cls(int(timestamp) - EPOCH, origin_tag, sequence_counter)

    @classmethod
    def parse(cls, text: str) -> 'Identifier':
        """Decode the text form. Raises MalformedIdentifierError."""
        return cls(*decode_identifier(text))

    @property
    def valid(self) -> bool:
        return self.timestamp_offset > 0

    def time(self) -> datetime | None:
        """Return the creation time in UTC, or None for an invalid identifier."""
        if not self.valid:
            return None
        return datetime.fromtimestamp(self.timestamp_offset + EPOCH, tz=UTC)

    def to_json(self) -> str | None:
        return str(self) if self.valid else None

    @classmethod
    def from_json(cls, value: str | None) -> 'Identifier':
        return cls() if value is None else cls.parse(value)

    def __str__(self) -> str:
        return encode_identifier(self.timestamp_offset, self.origin_tag, self.sequence_counter)


@dataclass
class Record:
    """Represent a stored URL mapping.

    Attributes:
        url (str):
            Target URL the identifier resolves to.
        id (Identifier):
            Assigned by the storage backend on first put; invalid until then.
        max_age (Optional[timedelta]):
            The record expires once this much time has passed since id.time().
            None or a non-positive value means the record never expires.
        meta (dict[str, Any]):
            Opaque, JSON-serializable metadata.
    """

    url: str
    id: Identifier = field(default_factory=Identifier)
    max_age: timedelta | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def expired(self, at: datetime) -> bool:
        """Check whether the record is expired at the given (aware) time."""
        if self.max_age is None or self.max_age <= timedelta(0):
            return False
        created = self.id.time()
        if created is None:
            return False
        return at > created + self.max_age

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id.valid:
            data['id'] = self.id.to_json()
        data['url'] = self.url
        if self.max_age:
            data['maxAge'] = self.max_age.total_seconds()
        if self.meta:
            data['meta'] = self.meta
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Record':
        max_age = data.get('maxAge')
        return cls(
            url=data.get('url', ''),
            id=Identifier.from_json(data.get('id')),
            max_age=timedelta(seconds=max_age) if max_age else None,
            meta=dict(data.get('meta') or {}),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_json(cls, text: str | bytes) -> 'Record':
        return cls.from_dict(json.loads(text))
