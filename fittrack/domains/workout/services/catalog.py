from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from fittrack.models import Exercise
from fittrack.domains.workout.config import get_engine_config

MAX_CATALOG_LIMIT = 1000


@dataclass(frozen=True)
class CatalogEntry:
    """Snapshot bất biến của 1 dòng catalog, dùng cho resolver."""
    id: int
    name: str
    muscle_group: str
    equipment: str

    @classmethod
    def from_model(cls, ex: Exercise) -> "CatalogEntry":
        return cls(
            id=ex.id,
            name=ex.name,
            muscle_group=ex.muscle_group or "",
            equipment=ex.equipment or "unknown",
        )


def _clamp_limit(limit: Union[int, str, None]) -> int:
    default = get_engine_config().catalog_limit
    try:
        limit_int = int(limit) if limit is not None else default
    except (TypeError, ValueError):
        limit_int = default
    return max(1, min(limit_int, MAX_CATALOG_LIMIT))


def list_catalog(limit: Union[int, str, None] = None) -> List[CatalogEntry]:
    """Read-only: trả catalog theo thứ tự id (ổn định cho fallback round-robin)."""
    qs = Exercise.objects.order_by("id")[: _clamp_limit(limit)]
    return [CatalogEntry.from_model(ex) for ex in qs]
