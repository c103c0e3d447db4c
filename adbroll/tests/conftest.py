import pytest


@pytest.fixture(autouse=True)
def _matching_settings(settings: pytest.FixtureRequest) -> None:
    """Pin the settings the matching code reads so local environment variables cannot leak in."""
    settings.MATCH_ACCEPTANCE_THRESHOLD = 0.55  # type: ignore[attr-defined]
    settings.MATCH_AI_CHUNK_SIZE = 20  # type: ignore[attr-defined]
    settings.MATCH_AI_MAX_VIDEOS = 100  # type: ignore[attr-defined]
    settings.MATCH_JOB_MAX_ATTEMPTS = 3  # type: ignore[attr-defined]
    settings.MATCH_JOB_LEASE_SECONDS = 900  # type: ignore[attr-defined]
    settings.AI_GATEWAY_API_KEY = ""  # type: ignore[attr-defined]
    settings.API_KEY = "test-secret-key"  # type: ignore[attr-defined]
