from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fittrack.core.state import BaseGraphState, BaseResult, generate_request_id
from fittrack.core.audit import new_audit


class WorkoutGraphState(BaseGraphState, total=False):
    """Workout planning state"""
    owner_id: str
    profile: Dict[str, Any]
    raw_plan: Optional[Dict[str, Any]]
    plan_document: Optional[Dict[str, Any]]
    plan_id: Optional[int]


@dataclass
class WorkoutPlanResult(BaseResult):
    """Workout plan result"""
    owner_id: str = ""
    profile: Dict[str, Any] = field(default_factory=dict)
    plan_id: Optional[int] = None
    plan_document: Optional[Dict[str, Any]] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "plan_id": self.plan_id,
            "profile": self.profile,
            "plan": self.plan_document,
            "issues": self.issues,
            "warnings": self.warnings,
        }


def init_workout_state(raw_input: Dict[str, Any]) -> WorkoutGraphState:
    """Initialize workout graph state"""
    return WorkoutGraphState(
        request_id=generate_request_id(),
        raw_input=raw_input,
        owner_id=str(raw_input.get("owner_id") or ""),
        profile={},
        raw_plan=None,
        plan_document=None,
        plan_id=None,
        issues=[],
        warnings=[],
        audit=new_audit(),
    )


def to_workout_result(state: WorkoutGraphState) -> WorkoutPlanResult:
    """Convert graph state to result"""
    return WorkoutPlanResult(
        request_id=state["request_id"],
        owner_id=state.get("owner_id", ""),
        profile=state.get("profile", {}),
        plan_id=state.get("plan_id"),
        plan_document=state.get("plan_document"),
        issues=state.get("issues", []),
        warnings=state.get("warnings", []),
        audit=state.get("audit", new_audit()),
    )
