from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from fittrack.domains.workout.errors import CatalogUnavailable
from fittrack.domains.workout.schemas import PlanExerciseSpec
from fittrack.domains.workout.services.catalog import CatalogEntry

logger = logging.getLogger(__name__)


class MatchTier(str, enum.Enum):
    EXACT = "exact"
    CATEGORY = "category"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Resolution:
    entry: CatalogEntry
    tier: MatchTier
    index: int


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def _exact_match(spec: PlanExerciseSpec, catalog: Sequence[CatalogEntry]) -> Optional[CatalogEntry]:
    name = _norm(spec.name)
    if not name:
        return None
    for entry in catalog:
        if _norm(entry.name) == name:
            return entry
    return None


def _category_match(spec: PlanExerciseSpec, catalog: Sequence[CatalogEntry]) -> Optional[CatalogEntry]:
    target = _norm(spec.muscle)
    if not target:
        return None
    for entry in catalog:
        group = _norm(entry.muscle_group)
        # chuỗi rỗng là substring của mọi chuỗi -> bỏ qua
        if group and (group in target or target in group):
            return entry
    return None


def resolve_exercise(spec: PlanExerciseSpec, catalog: Sequence[CatalogEntry], index: int) -> Resolution:
    """
    Map 1 exercise của plan -> đúng 1 catalog entry.

    Cascade (first match wins):
      1. exact    - tên trùng, không phân biệt hoa thường
      2. category - muscle_group là substring (2 chiều) của target muscle
      3. fallback - catalog[index % len(catalog)], luôn có kết quả
    """
    if not catalog:
        raise CatalogUnavailable()

    entry = _exact_match(spec, catalog)
    if entry is not None:
        return Resolution(entry=entry, tier=MatchTier.EXACT, index=index)

    entry = _category_match(spec, catalog)
    if entry is not None:
        logger.debug("[RESOLVER] #%s '%s' -> '%s' by muscle '%s'", index, spec.name, entry.name, spec.muscle)
        return Resolution(entry=entry, tier=MatchTier.CATEGORY, index=index)

    entry = catalog[index % len(catalog)]
    logger.warning(
        "[RESOLVER] #%s no match for '%s' (muscle='%s'), fallback to '%s'",
        index,
        spec.name,
        spec.muscle,
        entry.name,
    )
    return Resolution(entry=entry, tier=MatchTier.FALLBACK, index=index)


def resolve_plan(specs: Sequence[PlanExerciseSpec], catalog: Sequence[CatalogEntry]) -> List[Resolution]:
    """Resolve cả plan; catalog rỗng thì fail trước khi resolve bất kỳ item nào."""
    if not catalog:
        raise CatalogUnavailable()
    return [resolve_exercise(spec, catalog, i) for i, spec in enumerate(specs)]
