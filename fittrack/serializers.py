from rest_framework import serializers

from .models import Exercise
from fittrack.domains.workout.contract import FITNESS_GOAL_ENUM, canonicalize_training_day


class ExerciseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Exercise
        fields = ["id", "name", "muscle_group", "equipment", "image_url"]


class PlanGenerateSerializer(serializers.Serializer):
    fitness_goal = serializers.ChoiceField(choices=FITNESS_GOAL_ENUM, default="general-fitness")
    experience = serializers.ChoiceField(choices=["beginner", "intermediate", "advanced"], default="beginner")
    days_per_week = serializers.IntegerField(min_value=1, max_value=7, default=3)
    session_minutes = serializers.IntegerField(min_value=10, max_value=240, default=45)
    training_days = serializers.ListField(child=serializers.CharField(), required=False, allow_empty=True)
    equipment = serializers.ListField(child=serializers.CharField(), required=False, allow_empty=True)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=1000)

    def validate_training_days(self, value):
        out = []
        for v in value:
            canon = canonicalize_training_day(v)
            if canon is None:
                raise serializers.ValidationError(f"training_day không hợp lệ: {v}")
            if canon not in out:
                out.append(canon)
        return out

    def validate(self, attrs):
        days = attrs.get("training_days")
        if days and len(days) != attrs["days_per_week"]:
            raise serializers.ValidationError(
                {"training_days": f"Cần đúng {attrs['days_per_week']} ngày (days_per_week)."}
            )
        return attrs


class CompletionCreateSerializer(serializers.Serializer):
    duration = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    exercises_completed = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    total_exercises = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    calories_burned = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)

    def validate(self, attrs):
        done = attrs.get("exercises_completed")
        total = attrs.get("total_exercises")
        if done is not None and total is not None and done > total:
            raise serializers.ValidationError(
                {"exercises_completed": "exercises_completed không được lớn hơn total_exercises."}
            )
        return attrs


class LinkSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    exercise_id = serializers.IntegerField()
    exercise_name = serializers.CharField()
    muscle_group = serializers.CharField()
    equipment = serializers.CharField()
    sets = serializers.IntegerField()
    reps = serializers.IntegerField(allow_null=True)
    rest_time = serializers.IntegerField()
    order_position = serializers.IntegerField()
    match_tier = serializers.CharField()
    notes = serializers.CharField(allow_null=True)


class CompletionEntrySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    plan_id = serializers.IntegerField()
    kind = serializers.CharField()
    calories_burned = serializers.IntegerField(allow_null=True)
    rating = serializers.IntegerField(allow_null=True)
    notes = serializers.CharField()
    completed_at = serializers.DateTimeField(allow_null=True)
    metadata = serializers.SerializerMethodField()

    def get_metadata(self, obj):
        if obj.metadata is None:
            return None
        return obj.metadata.to_payload()
