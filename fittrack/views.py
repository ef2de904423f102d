import logging

from rest_framework import generics
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from .models import CompletionRecord, Exercise
from .serializers import (
    CompletionCreateSerializer,
    CompletionEntrySerializer,
    ExerciseSerializer,
    LinkSerializer,
    PlanGenerateSerializer,
)

from fittrack.domains.workout.errors import (
    CatalogUnavailable,
    PlanNotFound,
    PlanOwnershipError,
    StorageWriteFailure,
    WorkoutEngineError,
)
from fittrack.domains.workout.graph import run_workout_planning_pipeline
from fittrack.domains.workout.schemas import CompletionData
from fittrack.domains.workout.services.completion import (
    get_completion_count,
    get_completion_history,
    record_completion,
)
from fittrack.domains.workout.services.materializer import get_plan_workout, materialize_plan
from fittrack.domains.workout.services.stats import get_stats

logger = logging.getLogger(__name__)

OWNER_HEADER = "X-Owner-Id"

_ERROR_STATUS = {
    CatalogUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
    StorageWriteFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
    PlanNotFound: status.HTTP_404_NOT_FOUND,
    PlanOwnershipError: status.HTTP_403_FORBIDDEN,
}


class MissingOwner(Exception):
    pass


def get_current_owner_id(request):
    """request.user nếu đã auth, không thì header X-Owner-Id; None nếu không có."""
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_authenticated", False):
        return str(user.pk)
    owner = (request.headers.get(OWNER_HEADER) or "").strip()
    return owner or None


def _require_owner(request) -> str:
    owner_id = get_current_owner_id(request)
    if owner_id is None:
        raise MissingOwner()
    return owner_id


class WorkoutEngineAPIView(APIView):
    """Map lỗi của engine sang HTTP response."""

    def handle_exception(self, exc):
        if isinstance(exc, MissingOwner):
            return Response(
                {"error_type": "unauthenticated", "message": "Owner is required", "retryable": False},
                status=status.HTTP_401_UNAUTHORIZED,
            )
        if isinstance(exc, WorkoutEngineError):
            code = status.HTTP_500_INTERNAL_SERVER_ERROR
            for exc_type, mapped in _ERROR_STATUS.items():
                if isinstance(exc, exc_type):
                    code = mapped
                    break
            if code >= 500:
                logger.error("[API] %s: %s", exc.error_type, exc)
            return Response(
                {"error_type": exc.error_type, "message": str(exc), "retryable": exc.retryable},
                status=code,
            )
        return super().handle_exception(exc)


class ExerciseListView(generics.ListAPIView):
    queryset = Exercise.objects.all().order_by("id")
    serializer_class = ExerciseSerializer


class PlanGenerateView(WorkoutEngineAPIView):
    def post(self, request):
        owner_id = _require_owner(request)
        ser = PlanGenerateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        raw_input = dict(ser.validated_data)
        raw_input["owner_id"] = owner_id

        result = run_workout_planning_pipeline(raw_input)
        return Response(result.as_dict(), status=status.HTTP_201_CREATED)


class PlanMaterializeView(WorkoutEngineAPIView):
    def post(self, request, plan_id):
        owner_id = _require_owner(request)
        result = materialize_plan(plan_id, owner_id=owner_id)
        return Response(
            result.as_dict(),
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )


class PlanExercisesView(WorkoutEngineAPIView):
    def get(self, request, plan_id):
        owner_id = _require_owner(request)
        links = get_plan_workout(plan_id, owner_id=owner_id)
        data = LinkSerializer(links, many=True).data
        return Response({"plan_id": plan_id, "count": len(data), "results": data})


class PlanCompleteView(WorkoutEngineAPIView):
    def post(self, request, plan_id):
        owner_id = _require_owner(request)
        ser = CompletionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = CompletionData.model_validate(ser.validated_data)
        record = record_completion(plan_id, data, owner_id=owner_id)

        return Response({
            "id": record.pk,
            "plan_id": record.plan_id,
            "kind": record.kind,
            "notes": record.notes,
            "completed_at": record.completed_at,
            "completion_count": get_completion_count(owner_id, plan_id),
        }, status=status.HTTP_201_CREATED)


class CompletionHistoryView(WorkoutEngineAPIView):
    def get(self, request):
        owner_id = _require_owner(request)
        kind = request.query_params.get("kind") or CompletionRecord.KIND_AI_GENERATED
        limit = request.query_params.get("limit", "20")

        entries = get_completion_history(owner_id, kind=None if kind == "all" else kind, limit=limit)
        data = CompletionEntrySerializer(entries, many=True).data
        return Response({"kind": kind, "count": len(data), "results": data})


class StatsView(WorkoutEngineAPIView):
    def get(self, request):
        owner_id = _require_owner(request)
        return Response(get_stats(owner_id).as_dict())
