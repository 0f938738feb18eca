"""DRF authenticator that trusts the user resolved by ``JWTAuthMiddleware``.

Session tokens arrive either as ``Authorization: Bearer <token>`` or in the
``token`` cookie set by the GitHub callback. The middleware decodes them once
per request; this class only hands the result to DRF so ``request.user`` and
permission classes see the same identity.
"""

from typing import Any, Optional, Tuple

from django.contrib.auth.models import AnonymousUser
from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Expose ``request._request.user`` (set by middleware) to DRF."""

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        user = getattr(django_request, "user", None)
        if user is None or isinstance(user, AnonymousUser):
            return None

        if not getattr(user, "is_authenticated", False):
            return None

        return user, None

    def authenticate_header(self, request) -> str:
        # Makes DRF answer NotAuthenticated with 401 rather than 403.
        return "Bearer"


__all__ = ["MiddlewareUserAuthentication"]
