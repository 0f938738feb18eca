"""Exceptions raised by the sign-in flow."""

from rest_framework import status
from rest_framework.exceptions import APIException


class RegistrationClosed(APIException):
    """A new identity tried to register after the admin account exists."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Registration is closed"
    default_code = "registration_closed"


class OAuthError(APIException):
    """The OAuth provider rejected the code or returned an unusable profile."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "GitHub authorization failed"
    default_code = "oauth_error"


class BlocklistUnavailable(Exception):
    """Raised when the Redis blocklist cannot be checked (fail-closed)."""


__all__ = ["RegistrationClosed", "OAuthError", "BlocklistUnavailable"]
