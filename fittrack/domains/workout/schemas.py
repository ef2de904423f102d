from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from fittrack.domains.workout.config import get_engine_config
from fittrack.domains.workout.contract import canonicalize_training_day


def _maybe_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v)
    s = str(v).strip()
    if not s:
        return None
    try:
        return int(float(s))
    except ValueError:
        return None


def flatten_exercise_groups(raw: Any) -> List[Any]:
    """
    LLM trả exercises theo 2 shape:
      - phẳng:   [{name, muscle, sets, reps}, ...]
      - theo ngày: [{day, exercises: [{...}, ...]}, ...]
    Flatten về list phẳng, giữ thứ tự, gắn `day` cho từng item.
    """
    if not isinstance(raw, list):
        return []
    out: List[Any] = []
    for item in raw:
        if isinstance(item, dict) and isinstance(item.get("exercises"), list):
            day = item.get("day")
            for ex in item["exercises"]:
                if isinstance(ex, dict) and day and not ex.get("day"):
                    ex = {**ex, "day": day}
                out.append(ex)
        else:
            out.append(item)
    return out


def normalize_weekly_structure(raw: Any) -> List[Any]:
    """{"days": {"monday": {...}}} hoặc {"monday": {...}} hoặc list -> list[{day, ...}]"""
    if raw is None:
        return []
    if isinstance(raw, list):
        return [x for x in raw if isinstance(x, dict) and x.get("day")]
    if isinstance(raw, dict):
        days = raw.get("days") if isinstance(raw.get("days"), dict) else raw
        out = []
        for day, info in days.items():
            if isinstance(info, dict):
                out.append({**info, "day": day})
        return out
    return []


# ============================================================
# Generated plan document (LLM output, untrusted)
# ============================================================

class PlanExerciseSpec(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    muscle: str = Field(
        default="",
        validation_alias=AliasChoices("muscle", "muscle_group", "target_muscle"),
    )
    sets: int = Field(default_factory=lambda: get_engine_config().default_sets)
    reps: str = Field(default_factory=lambda: get_engine_config().default_reps)
    rest_time: int = Field(default_factory=lambda: get_engine_config().default_rest_sec)
    notes: Optional[str] = None
    day: Optional[str] = None

    @field_validator("name", "muscle", mode="before")
    @classmethod
    def _text_or_blank(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("notes", "day", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator("sets", mode="before")
    @classmethod
    def _sets_or_default(cls, v: Any) -> int:
        n = _maybe_int(v)
        if n is None or n < 1:
            return get_engine_config().default_sets
        return n

    @field_validator("reps", mode="before")
    @classmethod
    def _reps_as_text(cls, v: Any) -> str:
        s = "" if v is None else str(v).strip()
        return s or get_engine_config().default_reps

    @field_validator("rest_time", mode="before")
    @classmethod
    def _rest_or_default(cls, v: Any) -> int:
        n = _maybe_int(v)
        if n is None or n < 0:
            return get_engine_config().default_rest_sec
        return n


class WeeklyDay(BaseModel):
    model_config = ConfigDict(extra="ignore")

    day: str
    name: str = ""
    description: str = ""
    focus: str = ""
    duration: int = 0

    @field_validator("name", "description", "focus", mode="before")
    @classmethod
    def _text_or_blank(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("day", mode="before")
    @classmethod
    def _canon_day(cls, v: Any) -> str:
        s = str(v or "").strip()
        return canonicalize_training_day(s) or s.lower()

    @field_validator("duration", mode="before")
    @classmethod
    def _duration(cls, v: Any) -> int:
        n = _maybe_int(v)
        return n if n is not None and n >= 0 else 0


class GeneratedPlanDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1)
    description: str = ""
    fitness_goal: str = ""
    weekly_structure: List[WeeklyDay] = Field(default_factory=list)
    exercises: List[PlanExerciseSpec] = Field(min_length=1)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", "fitness_goal", mode="before")
    @classmethod
    def _text_or_blank(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("weekly_structure", mode="before")
    @classmethod
    def _weekly(cls, v: Any) -> List[Any]:
        return normalize_weekly_structure(v)

    @field_validator("exercises", mode="before")
    @classmethod
    def _flatten(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        return [x for x in flatten_exercise_groups(v) if isinstance(x, dict)]


# ============================================================
# Completion input
# ============================================================

class CompletionData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    duration: Optional[int] = Field(default=None, ge=0)
    exercises_completed: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("exercises_completed", "exercisesCompleted")
    )
    total_exercises: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("total_exercises", "totalExercises")
    )
    calories_burned: Optional[int] = Field(
        default=None, ge=0, validation_alias=AliasChoices("calories_burned", "caloriesBurned")
    )
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    user_notes: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("user_notes", "userNotes", "notes")
    )
