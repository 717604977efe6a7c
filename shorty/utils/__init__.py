from shorty.utils.codec import b61_encode, b61_decode, encode_identifier, decode_identifier
from shorty.utils.config import app_env, origin_tag, purge_interval, load_config
from shorty.utils.helpers import is_valid_url, utcnow
from shorty.utils.logging import initialize_logging


__all__ = [
    'b61_encode',
    'b61_decode',
    'encode_identifier',
    'decode_identifier',
    'app_env',
    'origin_tag',
    'purge_interval',
    'load_config',
    'is_valid_url',
    'utcnow',
    'initialize_logging',
]
