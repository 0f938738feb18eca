"""Editing session for one document: cached fields, loading and publishing."""

import enum
import logging
import threading
from typing import Any

from core.text import auto_summary, format_tags, parse_tags
from .api import ApiClient
from .errors import ApiError, PublishFailed, SubmissionInProgress, ValidationError
from .store import DRAFT_FIELDS, DraftCache

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "title": "",
    "summary": "",
    "tags": "",
    "alias": "",
    "content": "",
    "draft": False,
    "listed": True,
    "createdAt": None,
}


class SubmissionState(enum.Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCESS = "success"
    ERROR = "error"


def canonical_path(feed: dict) -> str:
    alias = feed.get("alias")
    return f"/{alias}" if alias else f"/feed/{feed['id']}"


class WritingSession:
    """Fields of the document being written, backed by a ``DraftCache``.

    Every change is written to the cache right away. ``load`` fetches an
    existing document once and only fills fields that have no cached value,
    so local edits survive. ``publish`` creates or updates the feed; only one
    submission may be in flight at a time.
    """

    def __init__(self, client: ApiClient, cache: DraftCache, doc_id: int | str | None = None):
        self.client = client
        self.cache = cache
        self.doc_id = doc_id
        self.fields: dict[str, Any] = {**DEFAULTS, **cache.load()}
        self.state = SubmissionState.IDLE
        self.error: str | None = None
        self.loaded = doc_id is None
        self._lock = threading.Lock()

    @property
    def is_new(self) -> bool:
        return self.doc_id is None

    @property
    def busy(self) -> bool:
        return self.state is SubmissionState.IN_FLIGHT

    def load(self) -> dict[str, Any]:
        """Pre-populate fields from the server the first time only."""
        if self.loaded:
            return self.fields
        feed = self.client.get_feed(self.doc_id)
        remote = {
            "title": feed.get("title") or "",
            "summary": feed.get("summary") or "",
            "tags": format_tags(feed.get("tags") or []),
            "alias": feed.get("alias") or "",
            "content": feed.get("content") or "",
            "draft": bool(feed.get("draft")),
            "listed": feed.get("listed", True),
            "createdAt": feed.get("createdAt"),
        }
        for field, value in remote.items():
            if not self.cache.has(field):
                self.fields[field] = value
        self.loaded = True
        logger.info("Loaded feed %s", self.doc_id)
        return self.fields

    def get(self, field: str) -> Any:
        return self.fields[field]

    def set(self, field: str, value: Any) -> None:
        if field not in DRAFT_FIELDS:
            raise KeyError(f"Unknown field: {field}")
        self.fields[field] = value
        self.cache.set(field, value)

    def update(self, **values: Any) -> None:
        for field, value in values.items():
            self.set(field, value)

    def suggested_summary(self) -> str:
        return auto_summary(self.fields["content"])

    def validate(self) -> None:
        if not self.is_new:
            return
        if not (self.fields["title"] or "").strip():
            raise ValidationError("Title is required")
        if not (self.fields["content"] or "").strip():
            raise ValidationError("Content is required")

    def payload(self) -> dict[str, Any]:
        payload = {
            "title": self.fields["title"],
            "content": self.fields["content"],
            "summary": self.fields["summary"],
            "alias": self.fields["alias"] or None,
            "tags": parse_tags(self.fields["tags"]),
            "draft": bool(self.fields["draft"]),
            "listed": bool(self.fields["listed"]),
        }
        if self.fields.get("createdAt"):
            payload["createdAt"] = self.fields["createdAt"]
        return payload

    def publish(self) -> str:
        """Create or update the feed and return its canonical path.

        Raises ``ValidationError`` before any request when a new document
        lacks a title or content, ``SubmissionInProgress`` while another
        publish is outstanding and ``PublishFailed`` with the server's
        message on failure.
        """
        with self._lock:
            if self.state is SubmissionState.IN_FLIGHT:
                raise SubmissionInProgress("A submission is already in progress")
            self.validate()
            self.state = SubmissionState.IN_FLIGHT
            self.error = None

        try:
            if self.is_new:
                feed = self.client.create_feed(self.payload())
            else:
                feed = self.client.update_feed(self.doc_id, self.payload())
            self.cache.clear()
        except ApiError as exc:
            with self._lock:
                self.state = SubmissionState.ERROR
                self.error = exc.message
            logger.warning("Publishing failed: %s", exc.message)
            raise PublishFailed(exc.message, exc.status) from exc
        except Exception as exc:
            with self._lock:
                self.state = SubmissionState.ERROR
                self.error = str(exc)
            logger.exception("Publishing failed")
            raise

        with self._lock:
            self.state = SubmissionState.SUCCESS
        path = canonical_path(feed)
        logger.info("Published feed %s at %s", feed.get("id"), path)
        return path


__all__ = ["WritingSession", "SubmissionState", "canonical_path"]
