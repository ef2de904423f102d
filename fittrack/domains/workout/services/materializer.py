from __future__ import annotations

import enum
import logging
import re
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from django.db import DatabaseError, IntegrityError, OperationalError, transaction
from django.utils import timezone

from fittrack.models import GeneratedPlan, Workout, WorkoutExerciseLink
from fittrack.domains.workout.config import get_engine_config
from fittrack.domains.workout.errors import ConcurrentMaterializationConflict, StorageWriteFailure
from fittrack.domains.workout.services.catalog import list_catalog
from fittrack.domains.workout.services.plan_document import default_plan_document, parse_plan_exercises
from fittrack.domains.workout.services.plans import get_owned_plan
from fittrack.domains.workout.services.resolver import resolve_plan

logger = logging.getLogger(__name__)

DEFAULT_WORKOUT_NAME = "AI Workout Plan"
DEFAULT_WORKOUT_DESCRIPTION = "Generated from AI workout plan"

_LEADING_INT = re.compile(r"^\s*(\d+)")


class MaterializationOutcome(str, enum.Enum):
    CREATED = "created"
    ALREADY_MATERIALIZED = "already_materialized"
    CONCURRENT_WINNER = "concurrent_winner"


@dataclass(frozen=True)
class LinkView:
    id: int
    exercise_id: int
    exercise_name: str
    muscle_group: str
    equipment: str
    sets: int
    reps: Optional[int]
    rest_time: int
    order_position: int
    match_tier: str
    notes: Optional[str] = None


@dataclass
class MaterializationResult:
    workout_id: int
    outcome: MaterializationOutcome
    links: List[LinkView] = field(default_factory=list)

    @property
    def created(self) -> bool:
        return self.outcome == MaterializationOutcome.CREATED

    def as_dict(self) -> Dict[str, Any]:
        return {
            "workout_id": self.workout_id,
            "outcome": self.outcome.value,
            "links": [asdict(link) for link in self.links],
        }


def parse_reps(reps: Any) -> Optional[int]:
    """'10' -> 10, '10-12' -> 10, 'AMRAP' -> None, '0' -> None."""
    if reps is None or isinstance(reps, bool):
        return None
    if isinstance(reps, int):
        return reps if reps > 0 else None
    m = _LEADING_INT.match(str(reps))
    if not m:
        return None
    return int(m.group(1)) or None


def load_workout_links(workout_id: int) -> List[LinkView]:
    qs = (
        WorkoutExerciseLink.objects.filter(workout_id=workout_id)
        .select_related("exercise")
        .order_by("order_position")
    )
    return [
        LinkView(
            id=link.id,
            exercise_id=link.exercise_id,
            exercise_name=link.exercise.name,
            muscle_group=link.exercise.muscle_group,
            equipment=link.exercise.equipment,
            sets=link.sets,
            reps=link.reps,
            rest_time=link.rest_time,
            order_position=link.order_position,
            match_tier=link.match_tier,
            notes=link.notes,
        )
        for link in qs
    ]


def _build_result(workout_id: int, outcome: MaterializationOutcome) -> MaterializationResult:
    return MaterializationResult(workout_id=workout_id, outcome=outcome, links=load_workout_links(workout_id))


def _materialize_once(plan_id: Any, owner_id: Optional[str]) -> MaterializationResult:
    cfg = get_engine_config()

    try:
        with transaction.atomic():
            # row lock: request thứ 2 chờ ở đây rồi thấy mapped=True
            plan = get_owned_plan(plan_id, owner_id, for_update=True)
            if plan.mapped:
                logger.info("[MATERIALIZE] plan=%s already mapped -> workout=%s", plan.pk, plan.materialized_workout_id)
                return _build_result(plan.materialized_workout_id, MaterializationOutcome.ALREADY_MATERIALIZED)

            specs = parse_plan_exercises(plan.exercises)
            if not specs:
                logger.warning("[MATERIALIZE] plan=%s has no usable exercises, using default plan exercises", plan.pk)
                specs = list(default_plan_document(plan.fitness_goal).exercises)

            # CatalogUnavailable nổ ở đây, trước khi ghi bất kỳ row nào
            resolutions = resolve_plan(specs, list_catalog(cfg.catalog_limit))

            workout = Workout.objects.create(
                owner_id=plan.owner_id,
                source_plan=plan,
                name=plan.title or DEFAULT_WORKOUT_NAME,
                description=plan.description or DEFAULT_WORKOUT_DESCRIPTION,
                day_of_week=timezone.localdate().isoweekday(),
            )

            WorkoutExerciseLink.objects.bulk_create(
                [
                    WorkoutExerciseLink(
                        workout=workout,
                        exercise_id=res.entry.id,
                        sets=spec.sets,
                        reps=parse_reps(spec.reps),
                        duration=None,
                        rest_time=cfg.default_rest_sec,
                        order_position=i,
                        notes=spec.notes,
                        match_tier=res.tier.value,
                    )
                    for i, (spec, res) in enumerate(zip(specs, resolutions))
                ]
            )

            plan.mapped = True
            plan.materialized_workout = workout
            plan.save(update_fields=["mapped", "materialized_workout"])
    except IntegrityError as e:
        if Workout.objects.filter(source_plan_id=plan_id).exists():
            raise ConcurrentMaterializationConflict(plan_id) from e
        raise StorageWriteFailure(f"Failed to materialize plan {plan_id}: {e}") from e
    except OperationalError:
        # transient, để materialize_plan quyết định retry cả operation
        raise
    except DatabaseError as e:
        raise StorageWriteFailure(f"Failed to materialize plan {plan_id}: {e}") from e

    tiers = [r.tier.value for r in resolutions]
    logger.info(
        "[MATERIALIZE] plan=%s -> workout=%s links=%s exact=%s category=%s fallback=%s",
        plan.pk,
        workout.pk,
        len(resolutions),
        tiers.count("exact"),
        tiers.count("category"),
        tiers.count("fallback"),
    )
    return _build_result(workout.pk, MaterializationOutcome.CREATED)


def _winner_result(plan_id: Any) -> MaterializationResult:
    workout = Workout.objects.get(source_plan_id=plan_id)
    return _build_result(workout.pk, MaterializationOutcome.CONCURRENT_WINNER)


def materialize_plan(plan: Any, *, owner_id: Optional[str] = None, max_retries: int = 0) -> MaterializationResult:
    """
    Chuyển GeneratedPlan thành Workout + links, đúng 1 lần cho mỗi plan.

    - plan đã mapped -> trả workout cũ (ALREADY_MATERIALIZED)
    - request song song thua unique constraint -> trả workout của bên thắng
    - CatalogUnavailable không retry; OperationalError retry cả operation
      tối đa `max_retries` lần (mặc định 0: caller tự quyết)
    """
    plan_id = plan.pk if isinstance(plan, GeneratedPlan) else plan
    backoff = get_engine_config().retry_backoff_sec

    attempt = 0
    while True:
        try:
            return _materialize_once(plan_id, owner_id)
        except ConcurrentMaterializationConflict:
            logger.info("[MATERIALIZE] plan=%s lost race, returning existing workout", plan_id)
            return _winner_result(plan_id)
        except OperationalError as e:
            if attempt >= max_retries:
                raise StorageWriteFailure(f"Failed to materialize plan {plan_id}: {e}") from e
            attempt += 1
            delay = backoff * (2 ** (attempt - 1))
            logger.warning("[MATERIALIZE] plan=%s transient error (%s), retry %s/%s in %.1fs", plan_id, e, attempt, max_retries, delay)
            time.sleep(delay)


def get_plan_workout(plan: Any, *, owner_id: Optional[str] = None) -> List[LinkView]:
    """Links theo thứ tự của plan; plan chưa map thì materialize trước."""
    return materialize_plan(plan, owner_id=owner_id).links
