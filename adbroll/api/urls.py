from django.urls import URLPattern, URLResolver, path
from rest_framework.routers import DefaultRouter

from adbroll.api.v1.views.health_check import HealthCheckView
from adbroll.api.v1.views.match import MatchBatchView, MatchJobViewSet, RebuildIndexView, SmartMatchView

router = DefaultRouter()
router.register(r"match-jobs", MatchJobViewSet, basename="match-job")

urlpatterns: list[URLPattern | URLResolver] = [
    *router.urls,
    path("health/", HealthCheckView.as_view(), name="api-health-check"),
    path("match-videos/", MatchBatchView.as_view(), name="api-match-videos"),
    path("smart-match/", SmartMatchView.as_view(), name="api-smart-match"),
    path("rebuild-index/", RebuildIndexView.as_view(), name="api-rebuild-index"),
]
