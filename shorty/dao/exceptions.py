"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    RecordNotFoundError:
        Raised when a Record is not found in the data store.

    SerializationError:
        Raised when a Record cannot be encoded for, or decoded from, the data store.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, locked database, etc.).

    StoreClosedError:
        Raised when a DAO is used after it has been closed.

Example:
    >>> from shorty.dao.exceptions import RecordNotFoundError
    >>> raise RecordNotFoundError("Record with id 'bb0btN0' not found.")
    Traceback (most recent call last):
        ...
    shorty.dao.exceptions.RecordNotFoundError: Record with id 'bb0btN0' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class RecordNotFoundError(DAOError):
    """Exception raised when a Record is not found in the data store."""

    pass


class SerializationError(DAOError):
    """Exception raised when a Record cannot be serialized or deserialized."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, locked or corrupt database files, etc.
    """

    pass


class StoreClosedError(DAOError):
    """Exception raised when a closed DAO is used."""

    pass
