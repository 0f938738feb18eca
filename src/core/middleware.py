"""Request middleware: session token authentication."""

import logging
from typing import Optional

from django.contrib.auth.models import AnonymousUser
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed

from users.exceptions import BlocklistUnavailable
from users.models import User
from users.services import TokenService, get_request_token

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(MiddlewareMixin):
    """Decode the session JWT, check the blocklist, and attach request.user.

    A bad bearer header is rejected with 401. A bad ``token`` cookie is
    ignored instead, so a stale cookie never locks a reader out of public
    pages.
    """

    def process_request(self, request):  # type: ignore[override]
        """Authenticate the request using a bearer header or token cookie."""
        request.user = AnonymousUser()
        token, source = get_request_token(request)
        if not token:
            return None

        try:
            payload = TokenService.decode_token(token)
            jti = payload.get("jti")
            user = self._get_user(payload.get("sub")) if jti else None
            if not user or not user.is_active or TokenService.is_token_blocked(jti):
                return _unauthorized() if source == "header" else None

            request.user = user
            return None

        except AuthenticationFailed:
            return _unauthorized() if source == "header" else None
        except BlocklistUnavailable:
            logger.error("Token blocklist unavailable")
            return _service_unavailable()

    @staticmethod
    def _get_user(user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        try:
            return User.objects.get(id=user_id)
        except (User.DoesNotExist, ValueError):
            return None


def _unauthorized() -> JsonResponse:
    return JsonResponse(
        {
            "data": None,
            "errors": ["Authentication credentials were not provided or are invalid, or the token was revoked."],
        },
        status=status.HTTP_401_UNAUTHORIZED,
    )


def _service_unavailable() -> JsonResponse:
    return JsonResponse(
        {"data": None, "errors": ["Authentication service unavailable (blocklist)."]},
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


__all__ = ["JWTAuthMiddleware"]
