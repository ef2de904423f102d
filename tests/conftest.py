"""Shared fixtures: catalog rows, AI plans, API client with an owner header."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest
from rest_framework.test import APIClient

from fittrack.models import Exercise, GeneratedPlan
from fittrack.shared.simple_cache import cache_clear

OWNER = "user-1"
OTHER_OWNER = "user-2"

CATALOG_ROWS = [
    ("Push-ups", "chest", "bodyweight"),
    ("Lat Pulldown", "back", "cable"),
    ("Barbell Squat", "quadriceps", "barbell"),
    ("Plank", "core", "bodyweight"),
    ("Dumbbell Curl", "biceps", "dumbbell"),
]


@pytest.fixture(autouse=True)
def _clear_process_caches():
    cache_clear()
    yield
    cache_clear()


@pytest.fixture
def catalog(db) -> List[Exercise]:
    return [
        Exercise.objects.create(name=name, muscle_group=muscle, equipment=equip)
        for name, muscle, equip in CATALOG_ROWS
    ]


@pytest.fixture
def make_plan(db) -> Callable[..., GeneratedPlan]:
    def _make(
        exercises: Optional[List[Dict[str, Any]]] = None,
        owner_id: str = OWNER,
        title: str = "Upper Body Builder",
        **extra: Any,
    ) -> GeneratedPlan:
        if exercises is None:
            exercises = [
                {"name": "Push-ups", "muscle": "chest", "sets": 3, "reps": "12"},
                {"name": "Unknown Lat Pulldown Variant X", "muscle": "back", "sets": 4, "reps": "8-10"},
            ]
        return GeneratedPlan.objects.create(
            owner_id=owner_id,
            title=title,
            description=extra.pop("description", "Generated for tests"),
            fitness_goal=extra.pop("fitness_goal", "muscle-gain"),
            exercises=exercises,
            **extra,
        )

    return _make


@pytest.fixture
def api_client() -> APIClient:
    client = APIClient()
    client.credentials(HTTP_X_OWNER_ID=OWNER)
    return client


PLAN_DOC = {
    "title": "Push Pull",
    "description": "Two day split",
    "fitness_goal": "muscle-gain",
    "weekly_structure": [{"day": "Monday", "focus": "Push", "duration": 45}, {"day": "thu", "focus": "Pull", "duration": 45}],
    "exercises": [
        {"day": "mon", "exercises": [{"name": "Push-ups", "muscle": "chest", "sets": 4, "reps": "12"}]},
        {"day": "thu", "exercises": [{"name": "Lat Pulldown", "muscle": "back"}]},
    ],
}


class FakeLLM:
    """Stands in for LLMClient: returns a canned document or raises."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.prompts: List[str] = []

    def generate_plan_json(self, prompt: str) -> Dict[str, Any]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response
