"""Abstract base class for Record data access objects (DAOs).

This class establishes a consistent contract for all Record DAO implementations,
regardless of the underlying storage mechanism (in-memory, SQLite, Redis).

Responsibilities:
    - Assign fresh identifiers atomically on insert.
    - Provide get / put / delete / full-scan operations over Record objects.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> import time
        >>> from shorty.models import Identifier, Record
        >>> from shorty.dao.memory import RecordMemoryDAO

        >>> dao = RecordMemoryDAO()
        >>> record = Record(url='https://example.com/blog/article-123')
        >>> dao.put(lambda counter: Identifier.new(1, time.time(), counter), record)
        Record(url='https://example.com/blog/article-123', id=Identifier(...), ...)

        >>> dao.get(str(record.id)).url
        'https://example.com/blog/article-123'
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from shorty.models import Identifier, Record
from shorty.constants import UINT32_MAX


IdentifierGenerator = Callable[[int], Identifier]
RecordVisitor = Callable[[str, Record], None]


class RecordBaseDAO(ABC):
    """Interface for Record data access objects (DAOs).

    Methods:
        get(key: str) -> Record:
            Retrieve a Record by the text form of its identifier.
            Raises RecordNotFoundError if the entry does not exist.

        put(generator: IdentifierGenerator, record: Record) -> Record:
            Insert or update a Record.
            A record without a valid identifier is assigned a fresh one.

        delete(*keys: str) -> int:
            Delete records by key. Absent keys are ignored.

        for_each(visitor: RecordVisitor) -> None:
            Visit all records in lexicographic key order.

        close() -> None:
            Release resources held by the DAO.

    All methods raise DataStoreError on connection or I/O failure and
    StoreClosedError once the DAO has been closed.

    Subclassing:
        Datastore-specific implementations must extend this class and implement
        all abstract methods. The atomic section in put() MUST cover reading and
        advancing the counter, calling the generator and writing the record, so
        that two concurrent puts never observe the same counter value.
    """

    @abstractmethod
    def get(self, key: str) -> Record:
        """Retrieve a Record from the data store by the text form of its identifier.

        Args:
            key (str):
                str(record.id) of the Record to retrieve.

        Returns:
            Record: a copy of the stored Record.

        Raises:
            RecordNotFoundError:
                If no Record with the given key exists.

            SerializationError:
                If the stored value cannot be decoded.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def put(self, generator: IdentifierGenerator, record: Record) -> Record:
        """Insert or update a Record.

        If record.id is valid, the stored record under str(record.id) is replaced.
        Otherwise, atomically:
            1. read and advance the persisted counter;
            2. call generator(<counter value before the increment>);
            3. assign the result to record.id;
            4. store the record under str(record.id).

        Args:
            generator (IdentifierGenerator):
                Callable mapping a counter value to a fresh Identifier.

            record (Record):
                Record to persist. Mutated in place when a fresh id is assigned.

        Returns:
            Record: the same record (for method chaining).

        Raises:
            SerializationError:
                If the record cannot be encoded.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, *keys: str) -> int:
        """Delete zero or more records. Absent keys are not an error.

        Returns:
            int: number of records actually removed.
        """
        pass

    @abstractmethod
    def for_each(self, visitor: RecordVisitor) -> None:
        """Visit every live record in lexicographic key order.

        Reserved bookkeeping keys (e.g. the counter) are never visited. An exception
        raised by the visitor aborts the scan and propagates to the caller.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release resources. A no-op when the DAO does not own its resources."""
        pass

    def __enter__(self) -> 'RecordBaseDAO':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def next_counter(counter: int) -> int:
        """Advance a 32-bit counter, wrapping to 0 on overflow."""
        return (counter + 1) & UINT32_MAX
