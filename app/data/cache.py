# app/data/cache.py
import redis

from app.utils.settings import REDIS_URL

_client: redis.Redis | None = None


def get_redis() -> redis.Redis:
    """Shared client; redis-py pools connections internally."""
    global _client
    if _client is None:
        _client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _client
