from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from fittrack.models import CompletionRecord, Workout
from fittrack.domains.workout import nodes

from .conftest import OTHER_OWNER, OWNER, PLAN_DOC, FakeLLM

pytestmark = pytest.mark.django_db


def test_exercise_list(api_client, catalog):
    resp = api_client.get("/api/exercises/")
    assert resp.status_code == 200
    assert [e["name"] for e in resp.data] == ["Push-ups", "Lat Pulldown", "Barbell Squat", "Plank", "Dumbbell Curl"]
    assert set(resp.data[0]) == {"id", "name", "muscle_group", "equipment", "image_url"}


@pytest.mark.parametrize(
    "method, url",
    [("post", "/api/plans/1/materialize/"), ("get", "/api/plans/1/exercises/"), ("get", "/api/stats/"), ("get", "/api/completions/")],
)
def test_owner_is_required(method, url):
    resp = getattr(APIClient(), method)(url)
    assert resp.status_code == 401
    assert resp.data["error_type"] == "unauthenticated"


class TestMaterializeEndpoints:
    def test_materialize_then_replay(self, api_client, catalog, make_plan):
        plan = make_plan()

        first = api_client.post(f"/api/plans/{plan.pk}/materialize/")
        second = api_client.post(f"/api/plans/{plan.pk}/materialize/")

        assert first.status_code == 201
        assert first.data["outcome"] == "created"
        assert second.status_code == 200
        assert second.data["outcome"] == "already_materialized"
        assert second.data["workout_id"] == first.data["workout_id"]
        assert [l["match_tier"] for l in first.data["links"]] == ["exact", "category"]

    def test_exercises_endpoint_materializes_on_demand(self, api_client, catalog, make_plan):
        plan = make_plan()

        resp = api_client.get(f"/api/plans/{plan.pk}/exercises/")

        assert resp.status_code == 200
        assert resp.data["count"] == 2
        assert resp.data["results"][1]["exercise_name"] == "Lat Pulldown"
        assert resp.data["results"][1]["reps"] == 8
        assert Workout.objects.filter(source_plan=plan).count() == 1

    def test_empty_catalog_is_retryable_503(self, api_client, make_plan):
        plan = make_plan()

        resp = api_client.post(f"/api/plans/{plan.pk}/materialize/")

        assert resp.status_code == 503
        assert resp.data == {
            "error_type": "catalog_unavailable",
            "message": "Exercise catalog is empty",
            "retryable": True,
        }

    def test_unknown_plan_is_404(self, api_client, catalog):
        assert api_client.post("/api/plans/999999/materialize/").status_code == 404

    def test_plan_of_another_owner_is_403(self, api_client, catalog, make_plan):
        plan = make_plan(owner_id=OTHER_OWNER)
        resp = api_client.post(f"/api/plans/{plan.pk}/materialize/")
        assert resp.status_code == 403
        assert resp.data["retryable"] is False


class TestCompletionEndpoints:
    def test_complete_and_read_history(self, api_client, make_plan):
        plan = make_plan()

        resp = api_client.post(
            f"/api/plans/{plan.pk}/complete/",
            {"exercises_completed": 8, "total_exercises": 10, "duration": 45, "notes": "Great!", "rating": 5},
        )

        assert resp.status_code == 201
        assert resp.data["completion_count"] == 1
        assert resp.data["notes"].endswith(
            '[DATA:{"exercisesCompleted":8,"totalExercises":10,"duration":45,"userNotes":"Great!"}]'
        )

        history = api_client.get("/api/completions/")
        assert history.status_code == 200
        assert history.data["count"] == 1
        assert history.data["results"][0]["metadata"] == {
            "exercisesCompleted": 8,
            "totalExercises": 10,
            "duration": 45,
            "userNotes": "Great!",
        }

    @pytest.mark.parametrize(
        "payload",
        [{"rating": 6}, {"duration": -5}, {"exercises_completed": 11, "total_exercises": 10}],
    )
    def test_invalid_payload_is_400(self, api_client, make_plan, payload):
        plan = make_plan()
        resp = api_client.post(f"/api/plans/{plan.pk}/complete/", payload)
        assert resp.status_code == 400
        assert not CompletionRecord.objects.exists()

    def test_history_kind_all_and_limit(self, api_client, make_plan):
        plan = make_plan()
        CompletionRecord.objects.create(owner_id=OWNER, plan=plan, kind="manual", notes="")
        api_client.post(f"/api/plans/{plan.pk}/complete/", {})
        api_client.post(f"/api/plans/{plan.pk}/complete/", {})

        assert api_client.get("/api/completions/").data["count"] == 2
        assert api_client.get("/api/completions/?kind=all").data["count"] == 3
        assert api_client.get("/api/completions/?kind=all&limit=1").data["count"] == 1

    def test_stats(self, api_client, make_plan):
        plan = make_plan()
        api_client.post(f"/api/plans/{plan.pk}/complete/", {"calories_burned": 250})

        resp = api_client.get("/api/stats/")

        assert resp.status_code == 200
        assert resp.data["total_count"] == 1
        assert resp.data["weekly_count"] == 1
        assert resp.data["percent_change"] == 100
        assert resp.data["daily_calories"] == 250


def test_generate_plan(api_client, catalog, monkeypatch):
    monkeypatch.setattr(nodes, "_LLM", FakeLLM(PLAN_DOC))

    resp = api_client.post("/api/plans/generate/", {"fitness_goal": "muscle-gain", "days_per_week": 2})

    assert resp.status_code == 201
    assert resp.data["plan"]["title"] == "Push Pull"

    plan_id = resp.data["plan_id"]
    materialized = api_client.post(f"/api/plans/{plan_id}/materialize/")
    assert materialized.status_code == 201
    assert [l["exercise_name"] for l in materialized.data["links"]] == ["Push-ups", "Lat Pulldown"]


def test_generate_rejects_bad_training_days(api_client):
    resp = api_client.post("/api/plans/generate/", {"days_per_week": 2, "training_days": ["mon", "someday"]})
    assert resp.status_code == 400
