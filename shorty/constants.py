from enum import StrEnum


# Epoch anchor for identifier timestamps: 2017-01-01T00:00:00Z.
# A 32-bit offset from here lasts until ~2153.
EPOCH = 1_483_228_800

# Base-61 alphabet (a-z, A-Z, 1-9). Digit '0' is reserved as the group separator.
ALPHABET = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ123456789'
SEPARATOR = '0'

# Text form of an identifier with a zero timestamp
INVALID_ID = '<invalid>'

UINT32_MAX = 0xFFFF_FFFF


class Interval:
    """Interval durations in seconds."""

    PURGE = 3_600  # Default delay between two reclamation sweeps (1 hour)


class ReaperPolicy:
    """Background reclamation defaults."""

    MAX_FAILURES = 3  # Consecutive failed sweeps before the loop gives up
    STOP_TIMEOUT = 5.0  # Seconds to wait for the worker thread on shutdown


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'SHORTY_ENV'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_FILE = 'SHORTY_CONFIG_FILE'
        ORIGIN_TAG = 'SHORTY_ORIGIN_TAG'
        PURGE_INTERVAL = 'SHORTY_PURGE_INTERVAL'

    class Store(StrEnum):
        BACKEND = 'SHORTY_BACKEND'
        DB_PATH = 'SHORTY_DB_PATH'
        ENCRYPTION_KEY = 'SHORTY_ENCRYPTION_KEY'  # noqa: S105

    class Redis(StrEnum):
        HOST = 'SHORTY_REDIS_HOST'
        PORT = 'SHORTY_REDIS_PORT'
        DB = 'SHORTY_REDIS_DB'
        PREFIX = 'SHORTY_REDIS_PREFIX'
