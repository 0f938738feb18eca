"""Custom exception handling to enforce the API error envelope."""

import logging
from typing import Any

from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.permissions import PERMISSION_DENIED
from users.exceptions import BlocklistUnavailable

logger = logging.getLogger(__name__)


def _normalize_errors(payload: Any) -> list[Any]:
    """Flatten DRF's response.data into a list of human-readable messages."""

    if isinstance(payload, list):
        return [str(item) for item in payload]
    if isinstance(payload, dict):
        if "detail" in payload:
            return [str(payload["detail"])]
        errors = []
        for field, messages in payload.items():
            if not isinstance(messages, list):
                messages = [messages]
            for message in messages:
                if field == "non_field_errors":
                    errors.append(str(message))
                else:
                    errors.append(f"{field}: {message}")
        return errors
    return [str(payload)]


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Wrap DRF errors in the ``{"data": null, "errors": [...]}`` shape.

    - Blocklist and database outages become 503 instead of HTML 500 pages.
    - Authentication problems are always 401; the specific reason is only
      exposed when ``DEBUG_AUTH_ERRORS`` is enabled.
    - DRF's generic 403 text is replaced with ``Permission denied``; specific
      403 details (e.g. closed registration) pass through.
    """

    if isinstance(exc, BlocklistUnavailable):
        return Response(
            {"data": None, "errors": ["Authentication service unavailable (blocklist)."]},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, DatabaseError):
        logger.exception("Database error while handling %s", context.get("view").__class__.__name__)
        return Response(
            {"data": None, "errors": ["Service temporarily unavailable."]},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = drf_exception_handler(exc, context)

    if response is None:
        return response

    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    if response.status_code >= 400:
        if response.status_code == status.HTTP_401_UNAUTHORIZED and not getattr(
            settings, "DEBUG_AUTH_ERRORS", False
        ):
            errors = ["Authentication credentials were not provided or are invalid."]
        elif response.status_code == status.HTTP_403_FORBIDDEN and (
            str(getattr(exc, "detail", "")) == str(PermissionDenied.default_detail)
        ):
            errors = [PERMISSION_DENIED]
        else:
            errors = _normalize_errors(response.data)

        response.data = {"data": None, "errors": errors}

    return response
