from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError

from fittrack.domains.workout.errors import MalformedPlanDocument
from fittrack.domains.workout.schemas import (
    GeneratedPlanDocument,
    PlanExerciseSpec,
    flatten_exercise_groups,
)

logger = logging.getLogger(__name__)


def default_plan_document(fitness_goal: str = "") -> GeneratedPlanDocument:
    """Plan tối thiểu, an toàn (bodyweight) khi output của LLM không dùng được."""
    return GeneratedPlanDocument(
        title="AI Workout Plan",
        description="Basic full-body plan used because the generated plan was incomplete.",
        fitness_goal=fitness_goal or "",
        weekly_structure=[
            {"day": "mon", "name": "Full Body", "focus": "Full Body", "duration": 30},
            {"day": "wed", "name": "Full Body", "focus": "Full Body", "duration": 30},
            {"day": "fri", "name": "Full Body", "focus": "Full Body", "duration": 30},
        ],
        exercises=[
            {"name": "Push-ups", "muscle": "chest", "sets": 3, "reps": "10"},
            {"name": "Bodyweight Squats", "muscle": "quadriceps", "sets": 3, "reps": "12"},
            {"name": "Plank", "muscle": "core", "sets": 3, "reps": "30"},
        ],
    )


def parse_plan_document(raw: Any) -> GeneratedPlanDocument:
    """Strict: thiếu title hoặc exercises -> MalformedPlanDocument."""
    if not isinstance(raw, dict):
        raise MalformedPlanDocument("Plan document must be a JSON object", missing=("title", "exercises"))

    missing = []
    if not str(raw.get("title") or "").strip():
        missing.append("title")
    if not flatten_exercise_groups(raw.get("exercises")):
        missing.append("exercises")
    if missing:
        raise MalformedPlanDocument(
            f"Plan document missing required fields: {', '.join(missing)}",
            missing=tuple(missing),
        )

    try:
        return GeneratedPlanDocument.model_validate(raw)
    except ValidationError as e:
        raise MalformedPlanDocument(f"Plan document failed validation: {e.error_count()} error(s)") from e


def sanitize_plan_document(raw: Any, fitness_goal: str = "") -> Tuple[GeneratedPlanDocument, List[str]]:
    """
    Input từ LLM là untrusted: không fail cả flow, thay bằng default plan.
    Trả (document, warnings).
    """
    try:
        return parse_plan_document(raw), []
    except MalformedPlanDocument as e:
        logger.warning("[PLAN] malformed plan document, using default plan: %s", e)
        return default_plan_document(fitness_goal), [str(e)]


def parse_plan_exercises(raw: Any) -> List[PlanExerciseSpec]:
    """
    Đọc lại exercises đã lưu trong GeneratedPlan (defensive).
    Item không phải object bị bỏ qua; field thiếu lấy default.
    """
    specs: List[PlanExerciseSpec] = []
    for i, item in enumerate(flatten_exercise_groups(raw)):
        if not isinstance(item, dict):
            logger.warning("[PLAN] skip non-object exercise at position %s", i)
            continue
        specs.append(PlanExerciseSpec.model_validate(item))
    return specs


def plan_document_to_fields(doc: GeneratedPlanDocument) -> Dict[str, Any]:
    """Map document -> field của model GeneratedPlan."""
    return {
        "title": doc.title,
        "description": doc.description,
        "fitness_goal": doc.fitness_goal,
        "weekly_structure": [d.model_dump() for d in doc.weekly_structure],
        "exercises": [e.model_dump() for e in doc.exercises],
    }
