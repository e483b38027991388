"""
Cache helpers for read-mostly landing page data.

All reads go through Django's cache framework (django-redis in production,
LocMemCache in development and tests). Cache access is best-effort: a
failing cache backend is logged and the producer result is served
directly.

Parameterised list endpoints (e.g. paginated foundations) cannot delete
their keys one by one, so they embed a namespace generation number in the
key. Bumping the generation makes every older key unreachable; the stale
entries then expire with their TTL.
"""

import logging
from typing import Any, Callable

from django.core.cache import cache

logger = logging.getLogger(__name__)

BANNER_KEY = "banner_data"
BANNER_TTL = 600

DIRECTOR_MESSAGE_KEY = "director_message"
DIRECTOR_MESSAGE_TTL = 3600

CARDS_KEY = "cards"
CARDS_TTL = 3600

FOUNDATION_LANDING_KEY = "foundation_data"
FOUNDATION_LANDING_TTL = 1800
FOUNDATIONS_NAMESPACE = "foundations"
FOUNDATION_DETAIL_TTL = 600

GOPAL_PARIWAR_KEY = "gopal_pariwar_data"
GOPAL_PARIWAR_TTL = 1800

_MISSING = object()


def cached(key: str, ttl: int, producer: Callable[[], Any]) -> Any:
    """
    Return the cached value for ``key`` or compute, store and return it.

    ``producer`` must return something picklable (plain serializer data).
    A ``None`` result is returned but not cached.
    """
    try:
        value = cache.get(key, _MISSING)
    except Exception:
        logger.exception("Cache read failed for %s", key)
        value = _MISSING

    if value is not _MISSING:
        logger.debug("Cache hit for %s", key)
        return value

    logger.debug("Cache miss for %s", key)
    value = producer()
    if value is not None:
        try:
            cache.set(key, value, ttl)
        except Exception:
            logger.exception("Cache write failed for %s", key)
    return value


def invalidate(*keys: str) -> None:
    try:
        cache.delete_many(keys)
    except Exception:
        logger.exception("Cache invalidation failed for %s", keys)


def _generation_key(namespace: str) -> str:
    return f"{namespace}:generation"


def namespaced_key(namespace: str, *parts: Any) -> str:
    """Build a key inside ``namespace`` that is invalidated by ``bump_namespace``."""
    try:
        generation = cache.get_or_set(_generation_key(namespace), 1, None)
    except Exception:
        logger.exception("Cache generation read failed for %s", namespace)
        generation = 0
    suffix = ":".join(str(part) for part in parts)
    return f"{namespace}:{generation}:{suffix}"


def bump_namespace(namespace: str) -> None:
    key = _generation_key(namespace)
    try:
        cache.incr(key)
    except ValueError:
        # Generation key evicted or never created
        cache.set(key, 2, None)
    except Exception:
        logger.exception("Cache namespace bump failed for %s", namespace)
