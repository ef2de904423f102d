from __future__ import annotations

import logging
from typing import Any, Dict

from fittrack.core.audit import append_event
from fittrack.shared.llm import LLMClient
from fittrack.domains.workout.config import get_engine_config
from fittrack.domains.workout.state import WorkoutGraphState
from fittrack.domains.workout.services.catalog import list_catalog
from fittrack.domains.workout.services.plan_document import plan_document_to_fields, sanitize_plan_document
from fittrack.domains.workout.services.planning import generate_workout_plan, normalize_profile
from fittrack.domains.workout.services.plans import save_plan_fields

logger = logging.getLogger(__name__)

# Tạo 1 instance dùng lại (đỡ overhead)
_LLM = LLMClient()


def node_profile(state: WorkoutGraphState) -> Dict[str, Any]:
    profile = normalize_profile(state["raw_input"])
    audit = append_event(state["audit"], "profile_done", {"profile": profile})
    return {"profile": profile, "audit": audit}


def node_generate(state: WorkoutGraphState) -> Dict[str, Any]:
    catalog = list_catalog(get_engine_config().catalog_limit)
    raw_plan = generate_workout_plan(_LLM, state["profile"], catalog)

    issues = list(state.get("issues", []))
    if isinstance(raw_plan, dict) and raw_plan.get("error_type"):
        issues.append({"type": raw_plan["error_type"], "detail": raw_plan.get("exception") or raw_plan.get("message")})

    logger.info("[PLAN] generate done catalog_size=%s failed=%s", len(catalog), bool(issues))
    audit = append_event(state["audit"], "generate_done", {"catalog_size": len(catalog), "failed": bool(issues)})
    return {"raw_plan": raw_plan, "issues": issues, "audit": audit}


def node_sanitize(state: WorkoutGraphState) -> Dict[str, Any]:
    doc, doc_warnings = sanitize_plan_document(state.get("raw_plan"), fitness_goal=state["profile"]["fitness_goal"])
    document = plan_document_to_fields(doc)
    if not document["fitness_goal"]:
        document["fitness_goal"] = state["profile"]["fitness_goal"]

    warnings = list(state.get("warnings", []))
    warnings.extend({"type": "plan_document_replaced", "detail": w} for w in doc_warnings)

    audit = append_event(
        state["audit"],
        "sanitize_done",
        {"exercises": len(document["exercises"]), "replaced": bool(doc_warnings)},
    )
    return {"plan_document": document, "warnings": warnings, "audit": audit}


def node_persist(state: WorkoutGraphState) -> Dict[str, Any]:
    document = state["plan_document"]
    plan = save_plan_fields(state["owner_id"], document)
    audit = append_event(state["audit"], "pipeline_end", {
        "plan_id": plan.pk,
        "issues": len(state.get("issues", [])),
        "warnings": len(state.get("warnings", [])),
    })
    return {"plan_id": plan.pk, "audit": audit}
