"""
Thread-safe rate-limited logging utilities.

Callers poll bundle status in their own loops, often many times per second;
this keeps repeated "still pending" messages from flooding the logs.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

_log_cache_lock = threading.RLock()
_log_caches = {}


def _cache_for(interval: int) -> TTLCache:
    with _log_cache_lock:
        if interval not in _log_caches:
            _log_caches[interval] = TTLCache(maxsize=256, ttl=interval)
        return _log_caches[interval]


def rate_limited_log(
    message: str,
    level: str = "info",
    interval: int = 60,
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message at most once per ``interval`` seconds.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        interval: Minimum interval between identical logs in seconds
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was logged, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    key = f"{log_instance.name}:{level}:{message}"

    cache = _cache_for(interval)
    with _log_cache_lock:
        if key in cache:
            return False
        cache[key] = True

    log_method(message)
    return True


def reset_rate_limited_log() -> None:
    """Forget everything that was logged (used by tests)."""
    with _log_cache_lock:
        _log_caches.clear()
