"""
Fixed-window request limits kept in the Django cache

Use a shared cache backend (Redis, Memcached, database) when running more
than one worker process.
"""

import logging

from django.core.cache import cache

from . import conf
from .exceptions import RateLimited

logger = logging.getLogger(__name__)


def rate_limit_key(scope, identifier):
    return f"panchayat_tax:ratelimit:{scope}:{identifier}"


def hit(scope, identifier, limit=None, window=None):
    """Count one request; returns the number of requests seen in the current window"""
    limit = limit or conf.get('BILL_RATE_LIMIT')
    window = window or conf.get('BILL_RATE_WINDOW')
    key = rate_limit_key(scope, identifier)

    if cache.add(key, 1, timeout=window):
        count = 1
    else:
        try:
            count = cache.incr(key)
        except ValueError:
            # expired between add() and incr()
            cache.add(key, 1, timeout=window)
            count = 1

    if count > limit:
        logger.warning(f"Rate limit exceeded for {scope} by {identifier}: {count}/{limit} in {window}s")
        raise RateLimited()
    return count


def reset(scope, identifier):
    cache.delete(rate_limit_key(scope, identifier))
