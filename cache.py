"""In-memory LRU cache for sentence translations.

Stories are re-read far more often than they are generated, so the same
sentence tends to be translated many times. Entries expire after
CACHE_TTL seconds; the least recently used entry goes first when full.
"""
import time
import hashlib
from typing import Optional
from collections import OrderedDict

from log import get_logger

logger = get_logger("lingotales.cache")

CACHE_MAX = 500
CACHE_TTL = 3600 * 24  # 24h

_translation_cache: OrderedDict = OrderedDict()  # key -> (timestamp, translation)
_hits = 0
_misses = 0


def cache_key(text: str, target_language: str) -> str:
    raw = f"{text.strip()}|{target_language.strip().lower()}"
    return hashlib.sha256(raw.encode()).hexdigest()


def cache_get(key: str) -> Optional[str]:
    global _hits, _misses
    entry = _translation_cache.get(key)
    if entry is None:
        _misses += 1
        return None
    ts, translation = entry
    if time.time() - ts > CACHE_TTL:
        _translation_cache.pop(key, None)
        _misses += 1
        return None
    _translation_cache.move_to_end(key)
    _hits += 1
    return translation


def cache_put(key: str, translation: str):
    _translation_cache[key] = (time.time(), translation)
    _translation_cache.move_to_end(key)
    if len(_translation_cache) > CACHE_MAX:
        evicted, _ = _translation_cache.popitem(last=False)
        logger.debug("Evicted translation", extra={"component": "cache", "detail": evicted})


def cache_clear():
    global _hits, _misses
    _translation_cache.clear()
    _hits = 0
    _misses = 0


def cache_stats() -> dict:
    total = _hits + _misses
    return {
        "entries": len(_translation_cache),
        "max": CACHE_MAX,
        "ttl_hours": CACHE_TTL / 3600,
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total, 3) if total else 0.0,
    }
