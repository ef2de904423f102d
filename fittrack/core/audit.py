from __future__ import annotations

import time
from typing import Any, Dict, Optional


def new_audit() -> Dict[str, Any]:
    return {"started_at": time.time(), "events": []}


def append_event(audit: Dict[str, Any], name: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Trả audit mới có thêm event (không mutate dict cũ); `t` là giây kể từ started_at."""
    started_at = audit.get("started_at") or time.time()
    event = {"name": name, "t": round(time.time() - started_at, 3), "payload": dict(payload or {})}
    return {**audit, "started_at": started_at, "events": [*audit.get("events", []), event]}
