"""
Global slowapi rate limiter.

Storage defaults to in-memory; point RATE_LIMIT_STORAGE_URI at the Redis
instance in production so limits are shared across workers.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from academy.dependencies import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.rate_limit_storage_uri,
    enabled=_settings.rate_limit_enabled,
)

order_claim_limit = _settings.order_claim_rate_limit
