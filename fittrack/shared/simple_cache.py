from __future__ import annotations

import time
from typing import Any, Dict, Hashable, Optional, Tuple

# bucket name -> key -> (expires_at theo monotonic clock, value); chỉ sống trong 1 process
_BUCKETS: Dict[str, Dict[Hashable, Tuple[float, Any]]] = {}


def cache_get(cache_name: str, key: Hashable) -> Any:
    """None nếu không có hoặc đã hết hạn."""
    entry = _BUCKETS.get(cache_name, {}).get(key)
    if entry is None:
        return None
    expires_at, value = entry
    if time.monotonic() >= expires_at:
        _BUCKETS[cache_name].pop(key, None)
        return None
    return value


def cache_set(cache_name: str, key: Hashable, value: Any, ttl_seconds: float = 600) -> None:
    _BUCKETS.setdefault(cache_name, {})[key] = (time.monotonic() + ttl_seconds, value)


def cache_clear(cache_name: Optional[str] = None) -> None:
    """Xoá 1 bucket, hoặc toàn bộ cache khi không truyền tên."""
    if cache_name is None:
        _BUCKETS.clear()
    else:
        _BUCKETS.pop(cache_name, None)
