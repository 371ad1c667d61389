from shared.database.postgres import Base, AsyncSessionFactory, get_async_session_factory
from shared.database.redis_client import RedisClient, get_redis_client

__all__ = [
    "Base",
    "get_async_session_factory",
    "AsyncSessionFactory",
    "get_redis_client",
    "RedisClient",
]
