from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from django.db import DatabaseError, connections, router, transaction
from django.utils import timezone

from fittrack.models import CompletionRecord
from fittrack.domains.workout.errors import StorageWriteFailure
from fittrack.domains.workout.schemas import CompletionData
from fittrack.domains.workout.services.completion_schema import detect_completion_columns
from fittrack.domains.workout.services.metadata_codec import (
    CompletionMetadata,
    compose_notes,
    extract_metadata,
)
from fittrack.domains.workout.services.plans import get_owned_plan

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100


@dataclass(frozen=True)
class CompletionEntry:
    id: int
    plan_id: int
    kind: str
    calories_burned: Optional[int]
    rating: Optional[int]
    notes: str
    completed_at: Optional[datetime]
    metadata: Optional[CompletionMetadata]

    @classmethod
    def from_record(cls, record: CompletionRecord) -> "CompletionEntry":
        return cls(
            id=record.pk,
            plan_id=record.plan_id,
            kind=record.kind,
            calories_burned=record.calories_burned,
            rating=record.rating,
            notes=record.notes,
            completed_at=record.completed_at,
            metadata=extract_metadata(record.notes),
        )


def _write_optional_columns(record: CompletionRecord, values: Dict[str, Any]) -> None:
    """UPDATE các cột optional (đã được probe xác nhận là tồn tại) trong cùng transaction."""
    conn = connections[router.db_for_write(CompletionRecord)]
    qn = conn.ops.quote_name
    assignments = ", ".join(f"{qn(col)} = %s" for col in values)
    sql = f"UPDATE {qn(CompletionRecord._meta.db_table)} SET {assignments} WHERE {qn('id')} = %s"
    with conn.cursor() as cursor:
        cursor.execute(sql, [*values.values(), record.pk])


def record_completion(
    plan_id: Any,
    data: Union[CompletionData, Mapping[str, Any], None],
    *,
    owner_id: str,
) -> CompletionRecord:
    """
    Ghi 1 lần hoàn thành workout của AI plan.

    Cột ổn định luôn được ghi; metadata đầy đủ nằm trong sentinel [DATA:...]
    cuối notes. duration / exercises_completed / total_exercises chỉ ghi vào
    cột riêng khi schema thật có các cột đó.
    """
    if not isinstance(data, CompletionData):
        data = CompletionData.model_validate(dict(data or {}))

    meta = CompletionMetadata(
        exercises_completed=data.exercises_completed,
        total_exercises=data.total_exercises,
        duration=data.duration,
        user_notes=data.user_notes,
    )
    notes = compose_notes(meta)
    optional_values = {
        "duration": data.duration,
        "exercises_completed": data.exercises_completed,
        "total_exercises": data.total_exercises,
    }

    plan = get_owned_plan(plan_id, owner_id)

    try:
        with transaction.atomic():
            supported = detect_completion_columns(router.db_for_write(CompletionRecord))

            record = CompletionRecord.objects.create(
                owner_id=str(owner_id),
                plan=plan,
                kind=CompletionRecord.KIND_AI_GENERATED,
                calories_burned=data.calories_burned,
                notes=notes,
                rating=data.rating,
                completed_at=timezone.now(),
            )

            extra = {col: v for col, v in optional_values.items() if col in supported and v is not None}
            if extra:
                _write_optional_columns(record, extra)
    except DatabaseError as e:
        logger.error("[COMPLETION] write failed plan=%s owner=%s: %s", plan_id, owner_id, e)
        raise StorageWriteFailure(f"Failed to record completion for plan {plan_id}: {e}") from e

    logger.info(
        "[COMPLETION] recorded log=%s plan=%s owner=%s dedicated_columns=%s",
        record.pk,
        plan.pk,
        owner_id,
        sorted(extra) or "none",
    )
    return record


def _clamp_limit(limit: Any) -> int:
    try:
        n = int(limit)
    except (TypeError, ValueError):
        n = DEFAULT_HISTORY_LIMIT
    return max(1, min(n, MAX_HISTORY_LIMIT))


def get_completion_history(
    owner_id: str,
    kind: Optional[str] = CompletionRecord.KIND_AI_GENERATED,
    limit: Any = DEFAULT_HISTORY_LIMIT,
) -> List[CompletionEntry]:
    """Mới nhất trước; kind=None -> mọi loại."""
    qs = CompletionRecord.objects.filter(owner_id=str(owner_id))
    if kind:
        qs = qs.filter(kind=kind)
    qs = qs.order_by("-completed_at", "-id")[: _clamp_limit(limit)]
    return [CompletionEntry.from_record(r) for r in qs]


def get_completion_count(owner_id: str, plan_id: Any) -> int:
    return CompletionRecord.objects.filter(
        owner_id=str(owner_id),
        kind=CompletionRecord.KIND_AI_GENERATED,
        plan_id=plan_id,
    ).count()


def erase_owner_completions(owner_id: str) -> int:
    """Xoá toàn bộ completion của 1 owner (đường xoá duy nhất cho workout_logs)."""
    try:
        with transaction.atomic():
            deleted, _ = CompletionRecord.objects.filter(owner_id=str(owner_id)).delete()
    except DatabaseError as e:
        raise StorageWriteFailure(f"Failed to erase completions for owner {owner_id}: {e}") from e
    logger.info("[COMPLETION] erased %s record(s) for owner=%s", deleted, owner_id)
    return deleted
