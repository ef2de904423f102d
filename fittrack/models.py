from django.db import models
from django.db.models import Q


class ImmutableRowError(Exception):
    """Raised when code tries to update a row that is write-once."""


class Exercise(models.Model):
    """Catalog entry. Read-only for the workout engine, filled by `import_exercises`."""

    name = models.CharField(max_length=255, unique=True)
    muscle_group = models.CharField(max_length=255, blank=True, default="")
    equipment = models.CharField(max_length=64, blank=True, default="unknown")

    image_url = models.URLField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name


class GeneratedPlan(models.Model):
    owner_id = models.CharField(max_length=64, db_index=True)

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    fitness_goal = models.CharField(max_length=64, blank=True, default="")

    # [{day, focus, duration}]
    weekly_structure = models.JSONField(default=list, blank=True)
    # [{name, muscle, sets, reps, rest_time, notes, day}] theo đúng thứ tự của plan
    exercises = models.JSONField(default=list, blank=True)

    ai_generated = models.BooleanField(default=True)

    # Set đúng 1 lần, cùng transaction với việc tạo workout
    mapped = models.BooleanField(default=False)
    materialized_workout = models.OneToOneField(
        "Workout",
        null=True,
        blank=True,
        on_delete=models.DO_NOTHING,
        related_name="+",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=Q(mapped=False) | Q(materialized_workout__isnull=False),
                name="plan_mapped_requires_workout",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class Workout(models.Model):
    owner_id = models.CharField(max_length=64, db_index=True)

    # unique: tối đa 1 workout cho mỗi plan, enforce ở tầng DB
    source_plan = models.OneToOneField(
        GeneratedPlan,
        on_delete=models.CASCADE,
        related_name="workout",
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    day_of_week = models.PositiveSmallIntegerField(null=True, blank=True)  # 1=Mon .. 7=Sun

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.name} (plan={self.source_plan_id})"


class WorkoutExerciseLink(models.Model):
    class MatchTier(models.TextChoices):
        EXACT = "exact", "Exact"
        CATEGORY = "category", "Category"
        FALLBACK = "fallback", "Fallback"

    workout = models.ForeignKey(Workout, on_delete=models.CASCADE, related_name="links")
    exercise = models.ForeignKey(Exercise, on_delete=models.PROTECT, related_name="+")

    sets = models.PositiveSmallIntegerField()
    reps = models.PositiveIntegerField(null=True, blank=True)
    duration = models.PositiveIntegerField(null=True, blank=True)
    rest_time = models.PositiveIntegerField(default=60)
    order_position = models.PositiveIntegerField()
    notes = models.TextField(null=True, blank=True)

    match_tier = models.CharField(max_length=16, choices=MatchTier.choices)

    class Meta:
        ordering = ["workout", "order_position"]
        constraints = [
            models.UniqueConstraint(
                fields=["workout", "order_position"],
                name="link_unique_position_per_workout",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRowError("WorkoutExerciseLink is immutable; create a new workout instead.")
        super().save(*args, **kwargs)


class CompletionRecord(models.Model):
    """
    Chỉ khai báo các cột chắc chắn có ở mọi deployment.

    duration / exercises_completed / total_exercises có thể có hoặc không tuỳ
    schema thực tế; recorder tự dò và ghi bằng SQL khi có (xem completion_schema).
    """

    KIND_AI_GENERATED = "ai_generated"

    owner_id = models.CharField(max_length=64, db_index=True)
    plan = models.ForeignKey(
        GeneratedPlan,
        on_delete=models.CASCADE,
        related_name="completions",
        db_column="ai_workout_plan_id",
    )
    kind = models.CharField(max_length=32, default=KIND_AI_GENERATED, db_column="workout_type")

    calories_burned = models.PositiveIntegerField(null=True, blank=True)
    rating = models.PositiveSmallIntegerField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")

    completed_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        db_table = "workout_logs"
        ordering = ["-completed_at"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRowError("CompletionRecord is write-once.")
        super().save(*args, **kwargs)
