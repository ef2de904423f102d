from __future__ import annotations

import logging

import pytest

from fittrack.domains.workout.errors import CatalogUnavailable
from fittrack.domains.workout.schemas import PlanExerciseSpec
from fittrack.domains.workout.services.catalog import CatalogEntry
from fittrack.domains.workout.services.resolver import MatchTier, resolve_exercise, resolve_plan

CATALOG = [
    CatalogEntry(id=1, name="Push-ups", muscle_group="chest", equipment="bodyweight"),
    CatalogEntry(id=2, name="Lat Pulldown", muscle_group="back", equipment="cable"),
    CatalogEntry(id=3, name="Bench Press", muscle_group="chest", equipment="barbell"),
    CatalogEntry(id=4, name="Mystery Move", muscle_group="", equipment="unknown"),
]


def spec(name: str, muscle: str = "") -> PlanExerciseSpec:
    return PlanExerciseSpec(name=name, muscle=muscle)


class TestResolveExercise:
    def test_exact_match_is_case_insensitive(self):
        res = resolve_exercise(spec("  bench PRESS "), CATALOG, 0)
        assert res.entry.id == 3
        assert res.tier is MatchTier.EXACT

    def test_exact_match_wins_over_category(self):
        # muscle "chest" would pick Push-ups first by category
        res = resolve_exercise(spec("Bench Press", "chest"), CATALOG, 0)
        assert res.entry.name == "Bench Press"
        assert res.tier is MatchTier.EXACT

    def test_category_match_takes_first_entry_in_catalog_order(self):
        res = resolve_exercise(spec("Incline Fly", "Upper Chest"), CATALOG, 5)
        assert res.entry.id == 1
        assert res.tier is MatchTier.CATEGORY

    def test_category_match_works_in_both_directions(self):
        res = resolve_exercise(spec("Row", "ba"), CATALOG, 0)
        assert res.entry.name == "Lat Pulldown"
        assert res.tier is MatchTier.CATEGORY

    def test_blank_muscle_never_matches_by_category(self):
        res = resolve_exercise(spec("Something New", ""), CATALOG, 1)
        assert res.tier is MatchTier.FALLBACK
        assert res.entry.id == 2

    def test_fallback_is_round_robin(self, caplog):
        with caplog.at_level(logging.WARNING):
            res = resolve_exercise(spec("Nothing Like It", "forearms"), CATALOG, 6)
        assert res.tier is MatchTier.FALLBACK
        assert res.entry is CATALOG[6 % len(CATALOG)]
        assert "fallback" in caplog.text

    def test_empty_catalog_raises(self):
        with pytest.raises(CatalogUnavailable):
            resolve_exercise(spec("Push-ups"), [], 0)


class TestResolvePlan:
    def test_push_ups_and_lat_pulldown_variant(self):
        catalog = [
            CatalogEntry(id=10, name="Push-ups", muscle_group="chest", equipment="bodyweight"),
            CatalogEntry(id=11, name="Lat Pulldown", muscle_group="back", equipment="cable"),
        ]
        out = resolve_plan(
            [spec("Push-ups", "chest"), spec("Unknown Lat Pulldown Variant X", "back")],
            catalog,
        )
        assert [(r.entry.name, r.tier) for r in out] == [
            ("Push-ups", MatchTier.EXACT),
            ("Lat Pulldown", MatchTier.CATEGORY),
        ]

    def test_every_spec_resolves_to_exactly_one_entry(self):
        specs = [spec(f"Exercise {i}", "calves") for i in range(9)]
        out = resolve_plan(specs, CATALOG)
        assert len(out) == len(specs)
        assert [r.index for r in out] == list(range(9))
        assert all(r.entry in CATALOG for r in out)

    def test_empty_catalog_fails_before_resolving(self):
        with pytest.raises(CatalogUnavailable):
            resolve_plan([spec("Push-ups")], [])

    def test_empty_plan_resolves_to_nothing(self):
        assert resolve_plan([], CATALOG) == []
