import fnmatch
import threading
import time
from typing import Optional, Dict, Any
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

_memory_cache: Dict[str, Dict[str, Any]] = {}
_cache_lock = threading.Lock()

def get(key: str) -> Optional[Any]:
    """Get item from cache"""
    with _cache_lock:
        _cleanup_expired()
        item = _memory_cache.get(key)
        if item and (item.get("expiry", 0) == 0 or time.time() < item["expiry"]):
            return item["value"]
        elif key in _memory_cache:
            del _memory_cache[key]
        return None

def set(key: str, value: Any, ttl: Optional[int] = None) -> bool:
    """Set item in cache"""
    if ttl is None:
        ttl = settings.CACHE_TTL

    with _cache_lock:
        expiry = time.time() + ttl if ttl > 0 else 0
        _memory_cache[key] = {
            "value": value,
            "expiry": expiry,
            "created_at": time.time()
        }
    return True

def delete(key: str) -> bool:
    """Delete item from cache"""
    with _cache_lock:
        return _memory_cache.pop(key, None) is not None

def delete_pattern(pattern: str) -> int:
    """Delete every key matching a glob pattern"""
    with _cache_lock:
        matched = [key for key in _memory_cache if fnmatch.fnmatchcase(key, pattern)]
        for key in matched:
            del _memory_cache[key]
    return len(matched)

def clear() -> bool:
    """Clear all cache"""
    with _cache_lock:
        _memory_cache.clear()
    return True

def _cleanup_expired():
    """Remove expired entries"""
    current_time = time.time()
    expired_keys = [
        key for key, item in _memory_cache.items()
        if item.get("expiry", 0) > 0 and current_time >= item["expiry"]
    ]
    for key in expired_keys:
        del _memory_cache[key]
