"""Tests for the batch matching endpoints: /api/v1/match-videos/ and /api/v1/smart-match/."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

import pytest
from rest_framework import status
from rest_framework.test import APIClient

from adbroll.models import Video
from adbroll.services.exceptions import CatalogUnavailableError
from adbroll.services.matching_impl import MatchBatchSummary
from adbroll.tests.factories import ProductFactory, VideoFactory

MATCH_URL = "/api/v1/match-videos/"
SMART_MATCH_URL = "/api/v1/smart-match/"

pytestmark = [
    pytest.mark.django_db,
]


@pytest.fixture
def client() -> APIClient:
    return APIClient()


def _summary(**overrides) -> MatchBatchSummary:
    values = {"offset": 0, "batch_size": 100, "threshold": 0.55}
    values.update(overrides)
    return MatchBatchSummary(**values)


class TestMatchVideosEndpoint:
    def test_pages_through_unmatched_videos(self, client: APIClient) -> None:
        ProductFactory(name="Crema Facial Hidratante", category=None)
        for i, title in enumerate(["Rutina de skincare nocturna", "Receta de tacos al pastor", "Mi viaje a la playa"]):
            VideoFactory(title=title, revenue=Decimal(100 - i))

        first = client.post(MATCH_URL, {"offset": 0, "batchSize": 2}, format="json")

        assert first.status_code == status.HTTP_200_OK
        body = first.json()
        assert body["success"] is True
        assert body["processed"] == 2
        assert body["remaining"] == 1
        assert body["complete"] is False
        assert body["nextOffset"] == 2

        second = client.post(MATCH_URL, {"offset": 2, "batchSize": 2}, format="json").json()

        assert second["processed"] == 1
        assert second["remaining"] == 0
        assert second["complete"] is True

    def test_matches_are_written(self, client: APIClient) -> None:
        product = ProductFactory(name="Audífonos Bluetooth Pro", category=None)
        video = VideoFactory(title="Estos audífonos bluetooth cambiaron mi vida 🎧✨")

        body = client.post(MATCH_URL, {"threshold": 0.55}, format="json").json()

        video.refresh_from_db()
        assert body["matched"] == 1
        assert body["fuzzy"] == 1
        assert video.product_id == product.id
        assert video.match_type == Video.MatchType.FUZZY

    @patch("adbroll.api.v1.views.match.BatchMatchOrchestrator")
    def test_defaults_apply_to_an_empty_body(self, mock_orchestrator_class, client: APIClient) -> None:
        mock_orchestrator_class.return_value.match_batch.return_value = _summary(complete=True)

        response = client.post(MATCH_URL)

        assert response.status_code == status.HTTP_200_OK
        mock_orchestrator_class.return_value.match_batch.assert_called_once_with(use_ai=False, batch_size=100, offset=0)

    def test_no_authentication_required(self, client: APIClient) -> None:
        response = client.post(MATCH_URL, {}, format="json", HTTP_X_API_KEY="not-checked")

        assert response.status_code == status.HTTP_200_OK

    def test_options_returns_empty_200(self, client: APIClient) -> None:
        response = client.options(MATCH_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.content == b""

    def test_preflight_is_answered_with_open_cors(self, client: APIClient) -> None:
        response = client.options(
            MATCH_URL,
            HTTP_ORIGIN="https://dashboard.example.com",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
            HTTP_ACCESS_CONTROL_REQUEST_HEADERS="content-type, x-client-info, apikey",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response["Access-Control-Allow-Origin"] == "*"
        assert "x-client-info" in response["Access-Control-Allow-Headers"]

    def test_responses_carry_open_cors_header(self, client: APIClient) -> None:
        response = client.post(MATCH_URL, {}, format="json", HTTP_ORIGIN="https://dashboard.example.com")

        assert response["Access-Control-Allow-Origin"] == "*"

    def test_malformed_body_returns_500(self, client: APIClient) -> None:
        response = client.post(MATCH_URL, data="{not json", content_type="application/json")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "error" in response.json()

    @pytest.mark.parametrize(
        "payload",
        [
            {"batchSize": 0},
            {"batchSize": 5000},
            {"offset": -1},
            {"threshold": 0},
            {"threshold": 2},
            {"batchSize": "many"},
        ],
    )
    def test_out_of_range_values_return_500(self, client: APIClient, payload) -> None:
        response = client.post(MATCH_URL, payload, format="json")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"].startswith("Invalid request body")

    @patch("adbroll.api.v1.views.match.BatchMatchOrchestrator")
    def test_store_failure_returns_500_with_message(self, mock_orchestrator_class, client: APIClient) -> None:
        mock_orchestrator_class.return_value.match_batch.side_effect = CatalogUnavailableError("Error fetching products: connection refused")

        response = client.post(MATCH_URL, {}, format="json")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "Error fetching products: connection refused"}


class TestSmartMatchEndpoint:
    @patch("adbroll.api.v1.views.match.BatchMatchOrchestrator")
    def test_runs_the_ai_pass(self, mock_orchestrator_class, client: APIClient) -> None:
        mock_orchestrator_class.return_value.match_batch.return_value = _summary(batch_size=20, processed=20, matched=5, ai=2)

        response = client.post(SMART_MATCH_URL, {"batchSize": 20, "threshold": 0.6}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["ai"] == 2
        mock_orchestrator_class.return_value.match_batch.assert_called_once_with(use_ai=True, batch_size=20, offset=0, threshold=0.6)

    def test_options_returns_empty_200(self, client: APIClient) -> None:
        response = client.options(SMART_MATCH_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.content == b""


def test_health_check(client: APIClient) -> None:
    response = client.get("/api/v1/health/")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok", "database": "ok"}
