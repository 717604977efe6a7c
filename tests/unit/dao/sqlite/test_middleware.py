"""Unit tests for vault value middleware.

Test coverage includes:
    1. PlainMiddleware is an identity transform
    2. FernetMiddleware encrypts, decrypts and rejects foreign tokens
"""

import pytest
from cryptography.fernet import Fernet

from shorty.dao.sqlite.middleware import PlainMiddleware, FernetMiddleware
from shorty.dao.exceptions import SerializationError


PAYLOAD = b'{"url":"https://example.com"}'


def test_plain_middleware_is_identity():
    middleware = PlainMiddleware()
    assert middleware.encode(PAYLOAD) == PAYLOAD
    assert middleware.decode(PAYLOAD) == PAYLOAD


def test_fernet_middleware_hides_plaintext():
    middleware = FernetMiddleware(Fernet.generate_key())
    token = middleware.encode(PAYLOAD)

    assert token != PAYLOAD
    assert b'example.com' not in token
    assert middleware.decode(token) == PAYLOAD


def test_fernet_middleware_accepts_str_key():
    key = Fernet.generate_key().decode('ascii')
    middleware = FernetMiddleware(key)
    assert middleware.decode(middleware.encode(PAYLOAD)) == PAYLOAD


def test_fernet_middleware_wrong_key():
    token = FernetMiddleware(Fernet.generate_key()).encode(PAYLOAD)

    with pytest.raises(SerializationError, match="Can't decrypt value"):
        FernetMiddleware(Fernet.generate_key()).decode(token)


def test_fernet_middleware_corrupt_token():
    with pytest.raises(SerializationError):
        FernetMiddleware(Fernet.generate_key()).decode(PAYLOAD)


def test_fernet_middleware_malformed_key():
    with pytest.raises(ValueError):
        FernetMiddleware('too-short')
