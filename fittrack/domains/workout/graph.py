from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

from langgraph.graph import START, END, StateGraph

from fittrack.core import GraphExecutor, append_event
from fittrack.domains.workout.state import (
    WorkoutGraphState,
    WorkoutPlanResult,
    init_workout_state,
    to_workout_result,
)

from fittrack.domains.workout import nodes as workout_nodes

PIPELINE_STEPS = (
    ("profile", workout_nodes.node_profile),
    ("generate", workout_nodes.node_generate),
    ("sanitize", workout_nodes.node_sanitize),
    ("persist", workout_nodes.node_persist),
)


def build_workout_graph() -> Any:
    """Compile planning graph: profile -> generate -> sanitize -> persist."""
    builder = StateGraph(WorkoutGraphState)

    previous = START
    for name, node in PIPELINE_STEPS:
        builder.add_node(name, node)
        builder.add_edge(previous, name)
        previous = name
    builder.add_edge(previous, END)

    return builder.compile()


@lru_cache(maxsize=1)
def get_workout_graph() -> Any:
    return build_workout_graph()


def run_workout_planning_pipeline(raw_input: Dict[str, Any]) -> WorkoutPlanResult:
    """Sinh plan bằng LLM và lưu thành GeneratedPlan (chưa materialize)."""
    state = init_workout_state(raw_input)
    state["audit"] = append_event(state["audit"], "pipeline_start", {"owner_id": state["owner_id"]})
    return GraphExecutor.execute(get_workout_graph(), state, to_workout_result, tag="PLAN")
