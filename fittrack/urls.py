from django.urls import path

from .views import (
    CompletionHistoryView,
    ExerciseListView,
    PlanCompleteView,
    PlanExercisesView,
    PlanGenerateView,
    PlanMaterializeView,
    StatsView,
)

urlpatterns = [
    path("exercises/", ExerciseListView.as_view(), name="exercise-list"),
    path("plans/generate/", PlanGenerateView.as_view(), name="plan-generate"),
    path("plans/<int:plan_id>/materialize/", PlanMaterializeView.as_view(), name="plan-materialize"),
    path("plans/<int:plan_id>/exercises/", PlanExercisesView.as_view(), name="plan-exercises"),
    path("plans/<int:plan_id>/complete/", PlanCompleteView.as_view(), name="plan-complete"),
    path("completions/", CompletionHistoryView.as_view(), name="completion-history"),
    path("stats/", StatsView.as_view(), name="workout-stats"),
]
