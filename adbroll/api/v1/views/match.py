import logging

from rest_framework import mixins, status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from adbroll.api.v1.serializers.match import MatchBatchRequestSerializer, MatchJobCreateSerializer, MatchJobSerializer
from adbroll.models import MatchJob
from adbroll.services.exceptions import ValidationError
from adbroll.services.match_queue_impl import MatchJobService
from adbroll.services.matching_impl import BatchMatchOrchestrator
from adbroll.tasks.matching import process_match_job

logger = logging.getLogger(__name__)


def _validated(serializer):
    if not serializer.is_valid():
        raise ValidationError(f"Invalid request body: {serializer.errors}", serializer.errors)
    return serializer.validated_data


def _error_response(error: Exception) -> Response:
    return Response({"error": str(error)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class MatchBatchView(APIView):
    """
    POST /api/v1/match-videos/: match one page of unmatched videos.

    Body: ``{batchSize?, offset?, threshold?}``. Responds with the batch summary;
    callers keep posting ``offset = nextOffset`` until ``complete`` is true.
    Any failure, including a malformed body, is reported as 500 ``{error}``.
    """

    authentication_classes: list[type] = []
    permission_classes = [AllowAny]
    use_ai = False

    def options(self, request: Request, *args, **kwargs) -> Response:
        return Response(status=status.HTTP_200_OK)

    def post(self, request: Request) -> Response:
        try:
            params = _validated(MatchBatchRequestSerializer(data=request.data))
            summary = BatchMatchOrchestrator().match_batch(use_ai=self.use_ai, **params)
        except Exception as e:
            logger.error(f"Error in {request.path}: {e}", exc_info=True)
            return _error_response(e)

        return Response(
            {
                "success": True,
                **summary.to_response(),
                "message": f"Matched {summary.matched} of {summary.processed} videos ({summary.remaining} remaining)",
            }
        )


class SmartMatchView(MatchBatchView):
    """POST /api/v1/smart-match/: batch matching followed by the AI fallback pass."""

    use_ai = True


class RebuildIndexView(APIView):
    """POST /api/v1/rebuild-index/: queue a full clear-and-rematch run. Requires ``X-API-KEY``."""

    def post(self, request: Request) -> Response:
        try:
            params = _validated(MatchBatchRequestSerializer(data=request.data))
            job_params = {"threshold": params["threshold"]} if "threshold" in params else {}
            job = MatchJobService(dispatcher=process_match_job.delay).enqueue(MatchJob.Kind.REBUILD_INDEX, job_params)
        except Exception as e:
            logger.error(f"Error queueing index rebuild: {e}", exc_info=True)
            return _error_response(e)

        return Response(MatchJobSerializer(job).data, status=status.HTTP_202_ACCEPTED)


class MatchJobViewSet(mixins.RetrieveModelMixin, GenericViewSet):
    """
    POST /api/v1/match-jobs/       : queue a job of any kind, answers 202.
    GET  /api/v1/match-jobs/{id}/  : current status and, once finished, the result.
    """

    queryset = MatchJob.objects.all()
    serializer_class = MatchJobSerializer

    def create(self, request: Request) -> Response:
        serializer = MatchJobCreateSerializer(data=request.data)
        try:
            _validated(serializer)
            job = MatchJobService(dispatcher=process_match_job.delay).enqueue(serializer.validated_data["kind"], serializer.to_job_params())
        except Exception as e:
            logger.error(f"Error queueing match job: {e}", exc_info=True)
            return _error_response(e)

        return Response(MatchJobSerializer(job).data, status=status.HTTP_202_ACCEPTED)
