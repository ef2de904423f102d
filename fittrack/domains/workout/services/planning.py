from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from fittrack.shared.llm import LLMClient
from fittrack.shared.simple_cache import cache_get, cache_set
from fittrack.domains.workout.contract import (
    FITNESS_GOAL_ENUM,
    MUSCLE_TAXONOMY,
    TRAINING_DAY_ENUM,
    canonicalize_training_day,
)
from fittrack.domains.workout.services.catalog import CatalogEntry

logger = logging.getLogger(__name__)

PLAN_CACHE_TTL = 900  # 15 phút
MAX_PROMPT_CATALOG_ITEMS = 60

_DEFAULT_TRAINING_DAYS = {
    1: ["mon"],
    2: ["mon", "thu"],
    3: ["mon", "wed", "fri"],
    4: ["mon", "tue", "thu", "fri"],
    5: ["mon", "tue", "wed", "thu", "fri"],
    6: ["mon", "tue", "wed", "thu", "fri", "sat"],
    7: list(TRAINING_DAY_ENUM),
}


def _maybe_int(v: Any, default: int) -> int:
    try:
        return int(float(str(v).strip()))
    except (TypeError, ValueError):
        return default


def normalize_profile(raw_input: Dict[str, Any]) -> Dict[str, Any]:
    """Chuẩn hoá input của user thành profile ổn định (dùng làm key cache của prompt)."""
    raw = raw_input or {}

    goal = str(raw.get("fitness_goal") or "").strip().lower().replace("_", "-")
    if goal not in FITNESS_GOAL_ENUM:
        goal = "general-fitness"

    days = min(max(_maybe_int(raw.get("days_per_week"), 3), 1), 7)
    minutes = min(max(_maybe_int(raw.get("session_minutes"), 45), 10), 240)

    training_days: List[str] = []
    for d in raw.get("training_days") or []:
        canon = canonicalize_training_day(str(d))
        if canon and canon not in training_days:
            training_days.append(canon)
    if len(training_days) != days:
        training_days = list(_DEFAULT_TRAINING_DAYS[days])
    training_days.sort(key=TRAINING_DAY_ENUM.index)

    experience = str(raw.get("experience") or "beginner").strip().lower()
    equipment = raw.get("equipment") or []
    if isinstance(equipment, str):
        equipment = [x.strip().lower() for x in equipment.split(",") if x.strip()]

    return {
        "fitness_goal": goal,
        "experience": experience,
        "days_per_week": days,
        "session_minutes": minutes,
        "training_days": training_days,
        "equipment": sorted({str(x).strip().lower() for x in equipment if str(x).strip()}),
        "notes": str(raw.get("notes") or "").strip(),
    }


def _format_catalog_lines(catalog: Sequence[CatalogEntry], max_items: int = MAX_PROMPT_CATALOG_ITEMS) -> str:
    return "\n".join(
        f"- {c.name} | muscle={c.muscle_group or '?'} | equip={c.equipment}" for c in list(catalog)[:max_items]
    )


def build_plan_prompt(profile: Dict[str, Any], catalog: Optional[Sequence[CatalogEntry]] = None) -> str:
    parts: List[str] = []

    parts.append("Task: create a weekly workout plan as JSON matching the schema.")
    parts.append("")
    parts.append("User profile:")
    parts.append(json.dumps(profile, ensure_ascii=False, sort_keys=True))
    parts.append("")

    parts.append("Valid muscle values (use exactly these for `muscle`):")
    parts.append(", ".join(MUSCLE_TAXONOMY))
    parts.append("")
    parts.append("Valid weekly_structure[].day values:")
    parts.append(", ".join(TRAINING_DAY_ENUM))
    parts.append("")

    if catalog:
        parts.append("Known exercises (prefer these exact names):")
        parts.append(_format_catalog_lines(catalog))
        parts.append("")

    parts.append("Output requirements:")
    parts.append("- title: short, non-empty")
    parts.append("- fitness_goal: one of " + ", ".join(FITNESS_GOAL_ENUM))
    parts.append(f"- weekly_structure: exactly {profile.get('days_per_week')} items, days {profile.get('training_days')}")
    parts.append("  - each item: {day, name, focus, duration} (duration in minutes)")
    parts.append("- exercises: ordered list of {name, muscle, sets, reps, rest_time, notes, day}")
    parts.append("  - reps is text, e.g. \"10\" or \"8-12\"")
    parts.append(f"  - total time per day must fit {profile.get('session_minutes')} minutes")
    parts.append("")
    parts.append("Return JSON only, no explanation.")
    return "\n".join(parts)


def generate_workout_plan(
    llm: LLMClient,
    profile: Dict[str, Any],
    catalog: Optional[Sequence[CatalogEntry]] = None,
) -> Dict[str, Any]:
    """
    Gọi LLM sinh plan document (untrusted). Cache theo prompt hash.
    LLM lỗi -> trả dict có error_type, không raise (node sanitize sẽ thay plan mặc định).
    """
    prompt = build_plan_prompt(profile, catalog)
    prompt_hash = hashlib.sha256(prompt.encode("utf-8")).hexdigest()

    cached = cache_get("plan_prompt", prompt_hash)
    if cached is not None:
        logger.info("[PLAN] prompt cache hit %s", prompt_hash[:12])
        return cached

    try:
        out = llm.generate_plan_json(prompt=prompt)
    except Exception as e:
        logger.error("[PLAN] LLM generation failed: %s", e)
        # không cache lỗi: lần sau vẫn thử gọi lại
        return {
            "error_type": "plan_generation_failed",
            "message": "LLM did not return a valid plan document.",
            "exception": str(e),
        }

    cache_set("plan_prompt", prompt_hash, out, ttl_seconds=PLAN_CACHE_TTL)
    return out
