"""Session tokens, the Redis blocklist and the GitHub OAuth exchange."""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode

import jwt
import requests
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed

from core.redis_client import get_redis_client
from .exceptions import BlocklistUnavailable, OAuthError

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"


class TokenService:
    """Handle session JWT issuance, decoding, and blocklist operations."""

    SESSION_TTL = timedelta(days=7)
    ALGORITHM = "HS256"
    TOKEN_TYPE = "session"
    BLOCKLIST_PREFIX = "blocklist:token:"

    @classmethod
    def generate_token(cls, user) -> str:
        """Issue a signed session token for the given user."""

        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "jti": str(uuid.uuid4()),
            "exp": int((now + cls.SESSION_TTL).timestamp()),
            "iat": int(now.timestamp()),
            "type": cls.TOKEN_TYPE,
        }
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=cls.ALGORITHM)

    @classmethod
    def decode_token(cls, token: str) -> dict[str, Any]:
        """Decode and validate a session JWT."""

        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[cls.ALGORITHM])
        except jwt.ExpiredSignatureError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Invalid token") from exc

        if payload.get("type") != cls.TOKEN_TYPE:
            raise AuthenticationFailed("Invalid token type")

        return payload

    @classmethod
    def block_token(cls, jti: str, exp: int) -> None:
        """Add token jti to blocklist until its expiration timestamp."""

        client = get_redis_client()
        ttl_seconds = max(1, exp - int(time.time()))
        try:
            client.setex(f"{cls.BLOCKLIST_PREFIX}{jti}", ttl_seconds, "1")
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while blocklisting") from exc

    @classmethod
    def is_token_blocked(cls, jti: str) -> bool:
        """Check if a token jti is present in the blocklist."""

        client = get_redis_client()
        try:
            return client.get(f"{cls.BLOCKLIST_PREFIX}{jti}") is not None
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while checking blocklist") from exc


def get_request_token(request) -> tuple[str | None, str | None]:
    """Return ``(token, source)`` where source is ``"header"`` or ``"cookie"``."""
    auth_header = request.META.get("HTTP_AUTHORIZATION", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip(), "header"
    cookie = request.COOKIES.get(TOKEN_COOKIE)
    if cookie:
        return cookie, "cookie"
    return None, None


class GitHubOAuth:
    """Authorization-code exchange against GitHub.

    Only the two HTTP calls the sign-in flow needs: code → access token and
    access token → user profile.
    """

    SCOPES = "read:user"
    TIMEOUT = 10

    def __init__(self, client_id: str | None = None, client_secret: str | None = None):
        self.client_id = client_id if client_id is not None else settings.GITHUB_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else settings.GITHUB_CLIENT_SECRET

    def authorize_url(self, state: str, redirect_uri: str) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": redirect_uri,
                "scope": self.SCOPES,
                "state": state,
            }
        )
        return f"{settings.GITHUB_AUTHORIZE_URL}?{query}"

    def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Trade an authorization code for an access token."""
        try:
            response = requests.post(
                settings.GITHUB_TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "redirect_uri": redirect_uri,
                },
                headers={"Accept": "application/json"},
                timeout=self.TIMEOUT,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("GitHub token exchange failed: %s", exc)
            raise OAuthError() from exc

        token = payload.get("access_token")
        if not token:
            logger.warning("GitHub token exchange rejected: %s", payload.get("error"))
            raise OAuthError(payload.get("error_description") or OAuthError.default_detail)
        return token

    def fetch_profile(self, access_token: str) -> dict[str, str]:
        """Return ``{openid, username, avatar}`` for the token's owner."""
        try:
            response = requests.get(
                settings.GITHUB_USER_URL,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                    "User-Agent": "inkfeed",
                },
                timeout=self.TIMEOUT,
            )
            response.raise_for_status()
            user = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("GitHub profile request failed: %s", exc)
            raise OAuthError() from exc

        if "id" not in user:
            raise OAuthError("GitHub profile is missing an id")
        return {
            "openid": str(user["id"]),
            "username": user.get("name") or user.get("login") or str(user["id"]),
            "avatar": user.get("avatar_url") or "",
        }


__all__ = ["TokenService", "GitHubOAuth", "get_request_token", "TOKEN_COOKIE"]
