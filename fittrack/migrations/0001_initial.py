import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Exercise",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, unique=True)),
                ("muscle_group", models.CharField(blank=True, default="", max_length=255)),
                ("equipment", models.CharField(blank=True, default="unknown", max_length=64)),
                ("image_url", models.URLField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="GeneratedPlan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("owner_id", models.CharField(db_index=True, max_length=64)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("fitness_goal", models.CharField(blank=True, default="", max_length=64)),
                ("weekly_structure", models.JSONField(blank=True, default=list)),
                ("exercises", models.JSONField(blank=True, default=list)),
                ("ai_generated", models.BooleanField(default=True)),
                ("mapped", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Workout",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("owner_id", models.CharField(db_index=True, max_length=64)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("day_of_week", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "source_plan",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="workout",
                        to="fittrack.generatedplan",
                    ),
                ),
            ],
        ),
        migrations.AddField(
            model_name="generatedplan",
            name="materialized_workout",
            field=models.OneToOneField(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.DO_NOTHING,
                related_name="+",
                to="fittrack.workout",
            ),
        ),
        migrations.AddConstraint(
            model_name="generatedplan",
            constraint=models.CheckConstraint(
                condition=models.Q(("mapped", False), ("materialized_workout__isnull", False), _connector="OR"),
                name="plan_mapped_requires_workout",
            ),
        ),
        migrations.CreateModel(
            name="WorkoutExerciseLink",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sets", models.PositiveSmallIntegerField()),
                ("reps", models.PositiveIntegerField(blank=True, null=True)),
                ("duration", models.PositiveIntegerField(blank=True, null=True)),
                ("rest_time", models.PositiveIntegerField(default=60)),
                ("order_position", models.PositiveIntegerField()),
                ("notes", models.TextField(blank=True, null=True)),
                (
                    "match_tier",
                    models.CharField(
                        choices=[("exact", "Exact"), ("category", "Category"), ("fallback", "Fallback")],
                        max_length=16,
                    ),
                ),
                (
                    "exercise",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="fittrack.exercise",
                    ),
                ),
                (
                    "workout",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="links",
                        to="fittrack.workout",
                    ),
                ),
            ],
            options={
                "ordering": ["workout", "order_position"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("workout", "order_position"),
                        name="link_unique_position_per_workout",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CompletionRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("owner_id", models.CharField(db_index=True, max_length=64)),
                ("kind", models.CharField(db_column="workout_type", default="ai_generated", max_length=32)),
                ("calories_burned", models.PositiveIntegerField(blank=True, null=True)),
                ("rating", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("completed_at", models.DateTimeField(blank=True, db_index=True, null=True)),
                (
                    "plan",
                    models.ForeignKey(
                        db_column="ai_workout_plan_id",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="completions",
                        to="fittrack.generatedplan",
                    ),
                ),
            ],
            options={
                "db_table": "workout_logs",
                "ordering": ["-completed_at"],
            },
        ),
    ]
