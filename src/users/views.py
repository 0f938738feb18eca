"""Sign-in endpoints: GitHub redirect/callback, profile and logout."""

import logging
import secrets
from typing import Any
from urllib.parse import urlencode, urlparse

from django.http import HttpResponseRedirect
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from core.response import BaseAPIView, api_response
from .exceptions import OAuthError
from .models import User
from .serializers import UserProfileSerializer
from .services import TOKEN_COOKIE, GitHubOAuth, TokenService, get_request_token

logger = logging.getLogger(__name__)

STATE_COOKIE = "state"
REDIRECT_COOKIE = "redirect_to"
STATE_MAX_AGE = 10 * 60


def _callback_uri(request) -> str:
    return request.build_absolute_uri(reverse("user-github-callback"))


class GitHubLoginView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Redirect to GitHub, remembering where the browser came from."""
        referer = request.META.get("HTTP_REFERER")
        if not referer:
            raise ValidationError("Referer not found")
        parsed = urlparse(referer)
        redirect_to = f"{parsed.scheme}://{parsed.netloc}"

        state = secrets.token_urlsafe(16)
        response = HttpResponseRedirect(GitHubOAuth().authorize_url(state, _callback_uri(request)))
        response.set_cookie(REDIRECT_COOKIE, redirect_to, max_age=STATE_MAX_AGE, httponly=True, samesite="Lax")
        response.set_cookie(STATE_COOKIE, state, max_age=STATE_MAX_AGE, httponly=True, samesite="Lax")
        return response


class GitHubCallbackView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Exchange the code, sign the user in and hand the token to the client."""
        code = request.query_params.get("code")
        state = request.query_params.get("state")
        if not code or not state:
            raise ValidationError("code and state are required")

        expected_state = request.COOKIES.get(STATE_COOKIE)
        if not expected_state or not secrets.compare_digest(expected_state, state):
            raise OAuthError("Invalid OAuth state")

        oauth = GitHubOAuth()
        access_token = oauth.exchange_code(code, _callback_uri(request))
        profile = oauth.fetch_profile(access_token)
        user = User.objects.sign_in_from_provider(**profile)
        token = TokenService.generate_token(user)
        logger.info("User %s signed in", user.pk)

        redirect_host = request.COOKIES.get(REDIRECT_COOKIE, "")
        response = HttpResponseRedirect(f"{redirect_host}/callback?{urlencode({'token': token})}")
        response.set_cookie(
            TOKEN_COOKIE,
            token,
            max_age=int(TokenService.SESSION_TTL.total_seconds()),
            path="/",
            samesite="Lax",
        )
        response.delete_cookie(STATE_COOKIE)
        return response


class ProfileView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return the caller's identity."""
        if not request.user.is_authenticated:
            raise PermissionDenied("Permission denied")
        return api_response(UserProfileSerializer(request.user).data)


class LogoutView(APIView):
    """Invalidate the current session token by blocklisting its jti."""

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Blocklist the session token and drop the cookie; 204 No Content."""
        token, _ = get_request_token(request)
        if not token:
            raise NotAuthenticated("Missing token.")

        payload = TokenService.decode_token(token)
        TokenService.block_token(payload["jti"], payload["exp"])
        response = Response(status=status.HTTP_204_NO_CONTENT)
        response.delete_cookie(TOKEN_COOKIE)
        return response


__all__ = ["GitHubLoginView", "GitHubCallbackView", "ProfileView", "LogoutView"]
