"""
Rate limiter configuration using SlowAPI
"""

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from app.config import Settings
from app.core.logging_config import get_logger

logger = get_logger(__name__)

def get_limiter_storage_uri(storage_uri: str) -> str:
    """Storage backend for limit counters; anything but redis falls back to memory"""
    if not storage_uri.startswith(("redis://", "rediss://", "memory://")):
        logger.warning("unsupported_rate_limit_storage", storage_uri=storage_uri)
        return "memory://"
    return storage_uri

def create_limiter(settings: Settings) -> Limiter:
    """One limiter per application, keyed on the client IP"""
    return Limiter(
        key_func=get_remote_address,
        storage_uri=get_limiter_storage_uri(settings.RATE_LIMIT_STORAGE_URI),
        headers_enabled=True  # Return X-RateLimit-* headers
    )

def rate_limit_exceeded_handler(request, exc):
    """
    Custom handler for rate limit exceptions
    Logs the violation and returns standardized error response
    """
    client_ip = get_remote_address(request)
    logger.warning("rate_limit_exceeded", ip=client_ip, path=request.url.path, limit=str(exc))

    return _rate_limit_exceeded_handler(request, exc)
