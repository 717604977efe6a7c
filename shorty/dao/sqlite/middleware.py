"""Value middleware for the vault store

A middleware transforms every value on its way into and out of the database,
beneath the transaction boundary. Keys are never transformed, so ordered
scans keep working on encrypted stores.

Classes:
    PlainMiddleware:
        Identity transform.
    FernetMiddleware:
        Symmetric authenticated encryption (AES-128-CBC + HMAC-SHA256) via `cryptography`.

Example:
    >>> from cryptography.fernet import Fernet
    >>> mw = FernetMiddleware(Fernet.generate_key())
    >>> mw.decode(mw.encode(b'{"url":"https://example.com"}'))
    b'{"url":"https://example.com"}'
"""

from cryptography.fernet import Fernet, InvalidToken

from shorty.dao.exceptions import SerializationError


class PlainMiddleware:
    """Store values as they are."""

    def encode(self, value: bytes) -> bytes:
        return value

    def decode(self, value: bytes) -> bytes:
        return value


class FernetMiddleware:
    """Encrypt values at rest with a Fernet key.

    Args:
        key (bytes | str):
            32 url-safe base64-encoded bytes, e.g. from Fernet.generate_key().

    Raises:
        ValueError: if the key is malformed.
    """

    def __init__(self, key: bytes | str):
        self.fernet = Fernet(key)

    def encode(self, value: bytes) -> bytes:
        return self.fernet.encrypt(value)

    def decode(self, value: bytes) -> bytes:
        try:
            return self.fernet.decrypt(value)
        except InvalidToken as e:
            raise SerializationError("Can't decrypt value: wrong key or corrupt data.") from e
