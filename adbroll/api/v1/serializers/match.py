from rest_framework import serializers

from adbroll.models import MatchJob
from adbroll.services.matching_impl.orchestrator import MAX_BATCH_SIZE


class MatchBatchRequestSerializer(serializers.Serializer):
    """
    Body of the batch matching endpoints.

    Field names are camelCase on the wire and snake_case in ``validated_data``
    so the result can be passed straight to ``match_batch``. An absent
    ``threshold`` falls back to the configured acceptance threshold.
    """

    batchSize = serializers.IntegerField(source="batch_size", min_value=1, max_value=MAX_BATCH_SIZE, default=100)
    offset = serializers.IntegerField(min_value=0, default=0)
    threshold = serializers.FloatField(required=False, min_value=0.0, max_value=1.0)

    def validate_threshold(self, value: float) -> float:
        if value <= 0:
            raise serializers.ValidationError("threshold must be greater than 0.")
        return value


class MatchJobCreateSerializer(MatchBatchRequestSerializer):
    kind = serializers.ChoiceField(choices=MatchJob.Kind.choices, default=MatchJob.Kind.MATCH_BATCH)
    all = serializers.BooleanField(default=False)

    def to_job_params(self) -> dict:
        """Parameters stored on the job; ``kind`` is kept on its own column."""
        params = dict(self.validated_data)
        params.pop("kind", None)
        return params


class MatchJobSerializer(serializers.ModelSerializer):
    """Read-only view of a queued match job."""

    maxAttempts = serializers.IntegerField(source="max_attempts", read_only=True)
    lastError = serializers.CharField(source="last_error", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    startedAt = serializers.DateTimeField(source="started_at", read_only=True, allow_null=True)
    finishedAt = serializers.DateTimeField(source="finished_at", read_only=True, allow_null=True)

    class Meta:
        model = MatchJob
        fields = [
            "id",
            "kind",
            "status",
            "params",
            "attempts",
            "maxAttempts",
            "result",
            "lastError",
            "createdAt",
            "startedAt",
            "finishedAt",
        ]
        read_only_fields = fields
