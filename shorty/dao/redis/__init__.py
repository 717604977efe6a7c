from shorty.dao.redis.redis_key_schema import RedisKeySchema
from shorty.dao.redis.record_redis_dao import RecordRedisDAO
from shorty.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'RecordRedisDAO',
    'RedisClientMixin',
]
