# fittrack/domains/workout/contract.py
from __future__ import annotations

from typing import Optional, Tuple


# ============================================================
# Taxonomy / Enums (single source of truth)
# ============================================================

MUSCLE_TAXONOMY: Tuple[str, ...] = (
    "chest",
    "shoulders",
    "triceps",
    "back",
    "biceps",
    "quadriceps",
    "hamstrings",
    "hips",      # canonical (replaces glutes)
    "calves",
    "core",
)
MUSCLE_TAXONOMY_SET = set(MUSCLE_TAXONOMY)

# Canonicalization aliases cho nhãn body part của catalog
MUSCLE_ALIASES = {
    "glutes": "hips",
    "glute": "hips",
    "hip": "hips",
    "waist": "core",
    "abs": "core",
    "thigh": "quadriceps",
    "thighs": "quadriceps",
    "quads": "quadriceps",
    "hamstring": "hamstrings",
    "calf": "calves",
    "upper arms": "biceps",
    "bicep": "biceps",
    "tricep": "triceps",
    "shoulder": "shoulders",
    "lats": "back",
}

FITNESS_GOAL_ENUM: Tuple[str, ...] = (
    "weight-loss",
    "muscle-gain",
    "general-fitness",
    "endurance",
    "strength",
)

TRAINING_DAY_ENUM: Tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

# chấp nhận "Mon", "monday", "TUE", ... rồi canonicalize về "mon"..."sun"
TRAINING_DAY_ALIASES = {
    "mon": "mon",
    "monday": "mon",
    "tue": "tue",
    "tues": "tue",
    "tuesday": "tue",
    "wed": "wed",
    "weds": "wed",
    "wednesday": "wed",
    "thu": "thu",
    "thur": "thu",
    "thurs": "thu",
    "thursday": "thu",
    "fri": "fri",
    "friday": "fri",
    "sat": "sat",
    "saturday": "sat",
    "sun": "sun",
    "sunday": "sun",
}

EQUIPMENT_RULES = [
    ("dumbbell", ["dumbbell"]),
    ("barbell", ["barbell"]),
    ("kettlebell", ["kettlebell"]),
    ("cable", ["cable", "pushdown", "pulldown"]),
    ("machine", ["machine", "lever"]),
    ("bodyweight", ["push-up", "pull-up", "chin-up", "plank", "burpee", "squat"]),
]


# ============================================================
# Helpers
# ============================================================

def canonicalize_muscle(m: str) -> str:
    m2 = (m or "").strip().lower()
    return MUSCLE_ALIASES.get(m2, m2)


def is_valid_muscle(muscle: str) -> bool:
    return (muscle or "").strip().lower() in MUSCLE_TAXONOMY_SET


def canonicalize_training_day(day: str) -> Optional[str]:
    """'Monday' -> 'mon'; trả None nếu không nhận ra."""
    key = (day or "").strip().lower()
    return TRAINING_DAY_ALIASES.get(key)


def infer_equipment(title: str) -> str:
    t = (title or "").lower()
    for equip, keys in EQUIPMENT_RULES:
        if any(k in t for k in keys):
            return equip
    return "unknown"
