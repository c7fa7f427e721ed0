"""Namespaced read-model caching on top of Django's cache framework.

Each namespace has a generation counter that is part of every key;
invalidating a namespace bumps the counter so all older entries become
unreachable at once. Any cache failure falls back to computing directly.
"""

import logging

from django.core.cache import cache

logger = logging.getLogger(__name__)


def _generation_key(namespace):
    return f'cachegen:{namespace}'


def _generation(namespace):
    key = _generation_key(namespace)
    generation = cache.get(key)
    if generation is None:
        cache.add(key, 1, timeout=None)
        generation = cache.get(key, 1)
    return generation


def make_key(namespace, *parts):
    suffix = ':'.join(str(part) for part in parts)
    return f'{namespace}:{_generation(namespace)}:{suffix}'


def get_or_compute(namespace, parts, compute, timeout):
    """Return the cached value for ``parts`` or compute and store it."""
    try:
        key = make_key(namespace, *parts)
        value = cache.get(key)
    except Exception:
        logger.warning('Cache read failed for %s; computing directly', namespace, exc_info=True)
        return compute()

    if value is not None:
        return value

    value = compute()
    try:
        cache.set(key, value, timeout)
    except Exception:
        logger.warning('Cache write failed for %s', namespace, exc_info=True)
    return value


def invalidate(*namespaces):
    for namespace in namespaces:
        key = _generation_key(namespace)
        try:
            try:
                cache.incr(key)
            except ValueError:
                # counter evicted or never created
                cache.add(key, 2, timeout=None)
        except Exception:
            logger.warning('Cache invalidation failed for %s', namespace, exc_info=True)
