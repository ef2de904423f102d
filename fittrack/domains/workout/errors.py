"""Exception hierarchy for the workout materialization and completion engine."""

from __future__ import annotations


class WorkoutEngineError(Exception):
    """Base exception for all workout engine errors."""

    error_type = "workout_engine_error"
    retryable = False


class CatalogUnavailable(WorkoutEngineError):
    """The exercise catalog is empty, so no plan exercise can be resolved."""

    error_type = "catalog_unavailable"
    retryable = True

    def __init__(self, message: str = "Exercise catalog is empty") -> None:
        super().__init__(message)


class PlanNotFound(WorkoutEngineError):
    error_type = "plan_not_found"

    def __init__(self, plan_id: object) -> None:
        super().__init__(f"Workout plan {plan_id} not found")
        self.plan_id = plan_id


class PlanOwnershipError(WorkoutEngineError):
    error_type = "plan_ownership"

    def __init__(self, plan_id: object) -> None:
        super().__init__(f"Workout plan {plan_id} does not belong to the current user")
        self.plan_id = plan_id


class ConcurrentMaterializationConflict(WorkoutEngineError):
    """Another request created the workout for this plan first."""

    error_type = "concurrent_materialization"

    def __init__(self, plan_id: object) -> None:
        super().__init__(f"Plan {plan_id} was materialized by a concurrent request")
        self.plan_id = plan_id


class StorageWriteFailure(WorkoutEngineError):
    """A database write failed; nothing from the operation was persisted."""

    error_type = "storage_write_failure"
    retryable = True


class MalformedPlanDocument(WorkoutEngineError):
    """The generated plan lacks a title or an exercise list."""

    error_type = "malformed_plan_document"

    def __init__(self, message: str, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing
