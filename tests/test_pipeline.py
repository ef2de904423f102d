from __future__ import annotations

import pytest

from fittrack.models import GeneratedPlan
from fittrack.shared.llm import LLMClient, LLMConfig
from fittrack.domains.workout import nodes
from fittrack.domains.workout.graph import run_workout_planning_pipeline
from fittrack.domains.workout.services.planning import build_plan_prompt, generate_workout_plan, normalize_profile

from .conftest import OWNER, PLAN_DOC, FakeLLM

pytestmark = pytest.mark.django_db


def test_normalize_profile_fills_defaults():
    profile = normalize_profile({"fitness_goal": "muscle_gain", "days_per_week": "2", "training_days": ["Thursday", "mon"]})
    assert profile["fitness_goal"] == "muscle-gain"
    assert profile["days_per_week"] == 2
    assert profile["training_days"] == ["mon", "thu"]
    assert profile["session_minutes"] == 45

    assert normalize_profile({"fitness_goal": "fly"})["fitness_goal"] == "general-fitness"
    assert normalize_profile({"days_per_week": 4, "training_days": ["mon"]})["training_days"] == ["mon", "tue", "thu", "fri"]


def test_prompt_lists_catalog_names(catalog):
    from fittrack.domains.workout.services.catalog import list_catalog

    prompt = build_plan_prompt(normalize_profile({}), list_catalog())
    assert "- Lat Pulldown | muscle=back | equip=cable" in prompt
    assert prompt.endswith("Return JSON only, no explanation.")


def test_generation_is_cached_by_prompt():
    llm = FakeLLM(PLAN_DOC)
    profile = normalize_profile({})

    assert generate_workout_plan(llm, profile) == PLAN_DOC
    assert generate_workout_plan(llm, profile) == PLAN_DOC
    assert len(llm.prompts) == 1


def test_generation_failure_is_reported_not_raised():
    llm = FakeLLM(error=RuntimeError("Missing OPENAI_API_KEY"))
    out = generate_workout_plan(llm, normalize_profile({}))
    assert out["error_type"] == "plan_generation_failed"
    # lỗi không được cache
    generate_workout_plan(llm, normalize_profile({}))
    assert len(llm.prompts) == 2


class TestPipeline:
    def test_persists_sanitized_plan(self, catalog, monkeypatch):
        monkeypatch.setattr(nodes, "_LLM", FakeLLM(PLAN_DOC))

        result = run_workout_planning_pipeline({"owner_id": OWNER, "fitness_goal": "muscle-gain", "days_per_week": 2})

        plan = GeneratedPlan.objects.get(pk=result.plan_id)
        assert plan.owner_id == OWNER
        assert plan.ai_generated is True
        assert plan.mapped is False
        assert plan.title == "Push Pull"
        assert [(e["name"], e["day"], e["sets"]) for e in plan.exercises] == [
            ("Push-ups", "mon", 4),
            ("Lat Pulldown", "thu", 3),
        ]
        assert [d["day"] for d in plan.weekly_structure] == ["mon", "thu"]
        assert result.issues == []
        assert result.warnings == []
        assert [e["name"] for e in result.audit["events"]] == [
            "pipeline_start",
            "profile_done",
            "generate_done",
            "sanitize_done",
            "pipeline_end",
        ]

    def test_plan_document_is_validated_once(self, catalog, monkeypatch):
        monkeypatch.setattr(nodes, "_LLM", FakeLLM(PLAN_DOC))
        calls = []
        real_sanitize = nodes.sanitize_plan_document

        def counting(raw, **kwargs):
            calls.append(raw)
            return real_sanitize(raw, **kwargs)

        monkeypatch.setattr(nodes, "sanitize_plan_document", counting)

        result = run_workout_planning_pipeline({"owner_id": OWNER, "days_per_week": 2})

        assert len(calls) == 1
        assert GeneratedPlan.objects.get(pk=result.plan_id).title == "Push Pull"

    def test_llm_failure_falls_back_to_default_plan(self, catalog, monkeypatch):
        monkeypatch.setattr(nodes, "_LLM", FakeLLM(error=RuntimeError("quota exceeded")))

        result = run_workout_planning_pipeline({"owner_id": OWNER, "fitness_goal": "weight-loss"})

        plan = GeneratedPlan.objects.get(pk=result.plan_id)
        assert [e["name"] for e in plan.exercises] == ["Push-ups", "Bodyweight Squats", "Plank"]
        assert plan.fitness_goal == "weight-loss"
        assert result.issues[0]["type"] == "plan_generation_failed"
        assert result.warnings[0]["type"] == "plan_document_replaced"


class TestLLMClient:
    def test_missing_key_fails_before_calling_provider(self):
        client = LLMClient(LLMConfig(provider="openai", openai_api_key=None))
        with pytest.raises(RuntimeError):
            client.generate_plan_json("prompt")

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            LLMClient(LLMConfig(provider="llama", openai_api_key="x")).generate_plan_json("prompt")

    def test_config_from_env(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", " Gemini ")
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("GEMINI_MODEL", "gemini-test")

        cfg = LLMConfig.from_env()

        assert (cfg.provider, cfg.api_key, cfg.model) == ("gemini", "g-key", "gemini-test")
