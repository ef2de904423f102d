from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError

from fittrack.models import GeneratedPlan
from fittrack.domains.workout.errors import PlanNotFound, PlanOwnershipError, StorageWriteFailure

logger = logging.getLogger(__name__)


def get_owned_plan(plan_id: Any, owner_id: Optional[str], for_update: bool = False) -> GeneratedPlan:
    """Lấy plan AI theo id; owner_id=None thì bỏ qua check quyền sở hữu."""
    qs = GeneratedPlan.objects.filter(ai_generated=True)
    if for_update:
        qs = qs.select_for_update()
    try:
        plan = qs.get(pk=plan_id)
    except (GeneratedPlan.DoesNotExist, ValueError, TypeError):
        raise PlanNotFound(plan_id) from None

    if owner_id is not None and plan.owner_id != str(owner_id):
        raise PlanOwnershipError(plan_id)
    return plan


def save_plan_fields(owner_id: str, fields: Dict[str, Any]) -> GeneratedPlan:
    """Lưu fields đã sanitize (output của plan_document_to_fields), không validate lại."""
    try:
        plan = GeneratedPlan.objects.create(owner_id=str(owner_id), ai_generated=True, **fields)
    except DatabaseError as e:
        raise StorageWriteFailure(f"Failed to save generated plan: {e}") from e

    logger.info("[PLAN] saved plan=%s owner=%s exercises=%s", plan.pk, owner_id, len(fields["exercises"]))
    return plan
