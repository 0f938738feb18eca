"""Envelope helpers shared by every API view.

Successful bodies are ``{"data": ..., "errors": []}``; failures are shaped by
``core.exceptions.custom_exception_handler``. Paged lists put
``{"size", "data", "hasNext"}`` inside ``data``.
"""

from typing import Any

from rest_framework.response import Response
from rest_framework.views import APIView


def api_response(data: Any, status: int = 200) -> Response:
    """Wrap ``data`` in the success envelope."""

    return Response({"data": data, "errors": []}, status=status)


def _is_enveloped(payload: Any) -> bool:
    return isinstance(payload, dict) and "data" in payload and "errors" in payload


class EnvelopeMixin:
    """Wrap successful DRF responses that bypassed ``api_response``.

    Redirects and other plain Django responses carry no ``data`` and pass
    through untouched, as do 204 responses.
    """

    def finalize_response(self, request, response, *args, **kwargs):  # type: ignore[override]
        data = getattr(response, "data", None)
        if data is not None and response.status_code < 400 and response.status_code != 204:
            if not _is_enveloped(data):
                response.data = {"data": data, "errors": []}
        return super().finalize_response(request, response, *args, **kwargs)  # type: ignore[attr-defined]


class BaseAPIView(EnvelopeMixin, APIView):
    """APIView whose successful responses always use the envelope."""


def parse_positive_int(value: Any, default: int, maximum: int | None = None) -> int:
    """Parse a query parameter as a positive int, falling back to ``default``."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        number = min(number, maximum)
    return number


MAX_PAGE = 100_000


def paginate(request, queryset, serializer_class, default_size: int = 10, max_size: int = 50) -> dict[str, Any]:
    """Slice ``queryset`` by the ``page``/``limit`` query parameters.

    Pages past ``MAX_PAGE`` are clamped to it.
    """
    page = parse_positive_int(request.query_params.get("page"), 1, MAX_PAGE)
    limit = parse_positive_int(request.query_params.get("limit"), default_size, max_size)
    size = queryset.count()
    offset = (page - 1) * limit
    return {
        "size": size,
        "data": serializer_class(queryset[offset:offset + limit], many=True).data,
        "hasNext": offset + limit < size,
    }


__all__ = ["api_response", "BaseAPIView", "EnvelopeMixin", "paginate", "parse_positive_int"]
