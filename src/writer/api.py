"""HTTP client for the inkfeed API.

Responses use the ``{"data": ..., "errors": [...]}`` envelope. ``data`` is
returned to the caller; the first error message is raised as ``ApiError``.
"""

import logging
from typing import Any, BinaryIO

import requests

from .errors import ApiError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ApiClient:
    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            raise ApiError(f"Unexpected response from server ({response.status_code})", response.status_code) from None

        errors = body.get("errors") if isinstance(body, dict) else None
        if not response.ok or errors:
            message = errors[0] if errors else f"Request failed ({response.status_code})"
            raise ApiError(str(message), response.status_code)
        return body.get("data") if isinstance(body, dict) else body

    def list_feeds(self, page: int = 1, limit: int = 10, kind: str = "normal") -> dict:
        return self._request("GET", "/feed", params={"page": page, "limit": limit, "type": kind})

    def get_feed(self, ident: int | str) -> dict:
        return self._request("GET", f"/feed/{ident}")

    def create_feed(self, payload: dict) -> dict:
        return self._request("POST", "/feed", json=payload)

    def update_feed(self, feed_id: int | str, payload: dict) -> dict:
        return self._request("POST", f"/feed/{feed_id}", json=payload)

    def upload(self, fileobj: BinaryIO, name: str) -> str:
        """Upload a file and return its public URL."""
        return self._request("POST", "/storage", data={"key": name}, files={"file": (name, fileobj)})

    def profile(self) -> dict:
        return self._request("GET", "/user/profile")


__all__ = ["ApiClient", "DEFAULT_TIMEOUT"]
