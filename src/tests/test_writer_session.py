"""Tests for draft caching, loading and publishing in the writing client."""

from __future__ import annotations

import json
import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from writer.api import ApiClient
from writer.errors import ApiError, PublishFailed, SubmissionInProgress, ValidationError
from writer.session import SubmissionState, WritingSession, canonical_path
from writer.store import DraftCache, LocalStore, Preferences

REMOTE_FEED = {
    "id": 7,
    "title": "Remote title",
    "summary": "Remote summary",
    "content": "Remote body",
    "alias": "remote",
    "tags": ["a", "b"],
    "draft": False,
    "listed": True,
    "createdAt": "2024-01-01T00:00:00Z",
}


class StoreTestCase(unittest.TestCase):
    """Gives each test its own store file."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = Path(tmp.name) / "storage.json"
        self.store = LocalStore(self.path)


class LocalStoreTests(StoreTestCase):
    """Key/value persistence and per-document scoping."""

    def test_values_persist_across_instances(self):
        self.store.set("k", {"v": 1})

        self.assertEqual(LocalStore(self.path).get("k"), {"v": 1})
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {"k": {"v": 1}})

    def test_corrupt_file_starts_empty(self):
        self.path.write_text("{not json", encoding="utf-8")

        self.assertEqual(LocalStore(self.path).get("k", "default"), "default")

    def test_draft_scopes_are_separate(self):
        new = DraftCache(self.store)
        existing = DraftCache(self.store, 7)
        new.set("title", "Unsaved")
        existing.set("title", "Saved")

        new.clear()

        self.assertEqual(new.load(), {})
        self.assertEqual(existing.load(), {"title": "Saved"})
        self.assertEqual(new.scope, "new")

    def test_unknown_draft_field_is_rejected(self):
        with self.assertRaises(KeyError):
            DraftCache(self.store).set("colour", "red")

    def test_preferences_defaults_and_updates(self):
        prefs = Preferences(self.store)
        self.assertEqual(prefs.font_size, Preferences.DEFAULT_FONT_SIZE)

        prefs.font_size = 18
        prefs.line_height = 1.8

        reloaded = Preferences(LocalStore(self.path))
        self.assertEqual(reloaded.as_dict()["fontSize"], 18)
        self.assertEqual(reloaded.line_height, 1.8)
        with self.assertRaises(ValueError):
            prefs.font_size = 0


class WritingSessionTests(StoreTestCase):
    """Load-once semantics and the submission state machine."""

    def setUp(self):
        super().setUp()
        self.client = mock.Mock(spec=ApiClient)
        self.client.get_feed.return_value = dict(REMOTE_FEED)

    def _session(self, doc_id=None):
        return WritingSession(self.client, DraftCache(self.store, doc_id), doc_id)

    def test_publish_with_empty_title_makes_no_request(self):
        session = self._session()
        session.set("content", "Body")

        with self.assertRaises(ValidationError):
            session.publish()

        self.client.create_feed.assert_not_called()
        self.assertIs(session.state, SubmissionState.IDLE)

    def test_publish_with_empty_content_makes_no_request(self):
        session = self._session()
        session.set("title", "Title")

        with self.assertRaises(ValidationError):
            session.publish()

        self.client.create_feed.assert_not_called()

    def test_create_sends_payload_clears_cache_and_returns_path(self):
        self.client.create_feed.return_value = {"id": 3, "alias": None}
        session = self._session()
        session.update(title="Hello", content="Body", tags="#a #b  #c", alias="")

        path = session.publish()

        self.assertEqual(path, "/feed/3")
        payload = self.client.create_feed.call_args.args[0]
        self.assertEqual(payload["tags"], ["a", "b", "c"])
        self.assertIsNone(payload["alias"])
        self.assertNotIn("createdAt", payload)
        self.assertIs(session.state, SubmissionState.SUCCESS)
        self.assertEqual(DraftCache(self.store).load(), {})

    def test_update_does_not_require_title(self):
        self.client.update_feed.return_value = {"id": 7, "alias": "remote"}
        session = self._session(7)
        session.load()
        session.set("title", "")

        self.assertEqual(session.publish(), "/remote")
        self.client.update_feed.assert_called_once()
        self.assertEqual(self.client.update_feed.call_args.args[0], 7)

    def test_server_error_is_surfaced_unchanged(self):
        self.client.create_feed.side_effect = ApiError("Alias already exists", 400)
        session = self._session()
        session.update(title="T", content="C")

        with self.assertRaises(PublishFailed) as ctx:
            session.publish()

        self.assertEqual(str(ctx.exception), "Alias already exists")
        self.assertEqual(session.error, "Alias already exists")
        self.assertIs(session.state, SubmissionState.ERROR)
        self.assertEqual(DraftCache(self.store).get("title"), "T")

    def test_unexpected_failure_does_not_leave_session_in_flight(self):
        """A local error after the request still ends the submission."""
        self.client.create_feed.return_value = {"id": 3, "alias": None}
        session = self._session()
        session.update(title="T", content="C")

        with mock.patch.object(DraftCache, "clear", side_effect=OSError("No space left on device")):
            with self.assertRaises(OSError):
                session.publish()

        self.assertIs(session.state, SubmissionState.ERROR)
        self.assertEqual(session.error, "No space left on device")
        self.assertEqual(session.publish(), "/feed/3")
        self.assertEqual(self.client.create_feed.call_count, 2)

    def test_load_populates_fields_exactly_once(self):
        session = self._session(7)

        session.load()
        session.set("title", "Local edit")
        session.load()

        self.client.get_feed.assert_called_once_with(7)
        self.assertEqual(session.get("title"), "Local edit")
        self.assertEqual(session.get("tags"), "#a #b")
        self.assertEqual(session.get("content"), "Remote body")

    def test_cached_fields_win_over_remote_values(self):
        DraftCache(self.store, 7).set("content", "Cached body")
        session = self._session(7)

        session.load()

        self.assertEqual(session.get("content"), "Cached body")
        self.assertEqual(session.get("title"), "Remote title")

    def test_new_document_never_fetches(self):
        self._session().load()

        self.client.get_feed.assert_not_called()

    def test_second_publish_while_in_flight_is_refused(self):
        started = threading.Event()
        release = threading.Event()

        def slow_create(payload):
            started.set()
            release.wait(5)
            return {"id": 1, "alias": None}

        self.client.create_feed.side_effect = slow_create
        session = self._session()
        session.update(title="T", content="C")

        worker = threading.Thread(target=session.publish)
        worker.start()
        self.assertTrue(started.wait(5))
        self.assertTrue(session.busy)

        with self.assertRaises(SubmissionInProgress):
            session.publish()

        release.set()
        worker.join(5)
        self.assertIs(session.state, SubmissionState.SUCCESS)
        self.assertEqual(self.client.create_feed.call_count, 1)

    def test_canonical_path(self):
        self.assertEqual(canonical_path({"id": 5, "alias": "about"}), "/about")
        self.assertEqual(canonical_path({"id": 5, "alias": ""}), "/feed/5")
