"""``X-API-KEY`` header authentication for the job endpoints.

The header is compared with ``settings.API_KEY`` using
:func:`hmac.compare_digest`. A missing header yields ``None`` so DRF reports
the request as unauthenticated; a wrong key, or a server without a key,
fails outright.
"""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING

from django.conf import settings
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

if TYPE_CHECKING:
    from rest_framework.request import Request


class ServiceClient:
    """Principal for a caller holding the shared API key (an operator or the scheduler)."""

    is_authenticated: bool = True

    def __str__(self) -> str:
        return "ServiceClient"


SERVICE_CLIENT = ServiceClient()

_HEADER = "HTTP_X_API_KEY"


class ApiKeyAuthentication(BaseAuthentication):
    def authenticate(self, request: Request) -> tuple[ServiceClient, str] | None:
        supplied: str | None = request.META.get(_HEADER)
        if supplied is None:
            return None

        expected: str = getattr(settings, "API_KEY", "")
        if not expected:
            raise AuthenticationFailed("API key authentication is not configured on the server.")

        if not hmac.compare_digest(supplied.encode(), expected.encode()):
            raise AuthenticationFailed("Invalid API key.")

        return SERVICE_CLIENT, "api_key"

    def authenticate_header(self, request: Request) -> str:
        # Makes DRF answer 401 rather than 403 when the key is missing.
        return "X-API-KEY"
