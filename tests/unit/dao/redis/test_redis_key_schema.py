"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

This test suite verifies the correctness and consistency of Redis key
generation supplied by RedisKeySchema.

Test coverage includes:

1. Record key generation
   - Ensures record_key() embeds the identifier text form.

2. Bookkeeping keys
   - Ensures counter_key() and index_key() never collide with record keys.

3. Prefix behavior
   - Confirms keys are prefixed only when a prefix is provided.

4. Invalid prefix types
   - Ensures improper prefix types raise TypeError.

5. Bulk record keys
   - Ensures record_keys() qualifies every identifier.
"""

import pytest

from shorty.models import Identifier
from shorty.exceptions import MalformedIdentifierError
from shorty.dao.redis.redis_key_schema import RedisKeySchema


# -------------------------------
# 1. Record key generation
# -------------------------------


@pytest.mark.parametrize(
    'key, expected',
    [
        ('bb0btN0', 'records:bb0btN0'),
        ('pObko0btN0b', 'records:pObko0btN0b'),
    ],
)
def test_record_key(key, expected):
    """Ensure record_key() generates valid Redis keys."""
    keys = RedisKeySchema()
    assert keys.record_key(key) == expected


# -------------------------------
# 2. Bookkeeping keys
# -------------------------------


def test_bookkeeping_keys():
    keys = RedisKeySchema()
    assert keys.counter_key() == 'records:counter'
    assert keys.index_key() == 'records:index'


def test_bookkeeping_keys_never_match_record_keys():
    """'counter' and 'index' are not identifier text forms, so no record key can shadow them."""
    keys = RedisKeySchema()
    assert keys.record_key('bb0btN0') not in (keys.counter_key(), keys.index_key())

    for word in ('counter', 'index'):
        with pytest.raises(MalformedIdentifierError):
            Identifier.parse(word)


# -------------------------------
# 3. Prefix behavior
# -------------------------------


@pytest.mark.parametrize(
    'prefix, expected_record_key, expected_counter_key, expected_index_key',
    [
        ('shorty:prod', 'shorty:prod:records:bb0btN0', 'shorty:prod:records:counter', 'shorty:prod:records:index'),
        ('secret', 'secret:records:bb0btN0', 'secret:records:counter', 'secret:records:index'),
        (None, 'records:bb0btN0', 'records:counter', 'records:index'),
    ],
)
def test_key_prefixing(prefix, expected_record_key, expected_counter_key, expected_index_key):
    """Ensure keys are correctly prefixed when a prefix is provided."""
    keys = RedisKeySchema(prefix=prefix)
    assert keys.record_key('bb0btN0') == expected_record_key
    assert keys.counter_key() == expected_counter_key
    assert keys.index_key() == expected_index_key


# -------------------------------
# 4. Invalid prefix types
# -------------------------------


@pytest.mark.parametrize('prefix', [123, -1, 45.6, [], {}])
def test_invalid_prefix_type_raises_error(prefix):
    """Ensure invalid prefix types raise a TypeError."""
    with pytest.raises(TypeError):
        RedisKeySchema(prefix=prefix)


# -------------------------------
# 5. Bulk record keys
# -------------------------------


def test_record_keys():
    keys = RedisKeySchema(prefix='shorty:test')
    assert keys.record_keys(('bb0b', 'bb0c')) == ['shorty:test:records:bb0b', 'shorty:test:records:bb0c']
    assert keys.record_keys([]) == []
