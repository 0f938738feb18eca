"""Tests for the preview debouncer."""

from __future__ import annotations

import threading
import time
import unittest

from writer.debounce import Debouncer, debounce


class DebouncerTests(unittest.TestCase):
    """Bursts coalesce; cancel drops and flush forces the pending call."""

    def test_burst_runs_once_with_latest_arguments(self):
        calls = []
        done = threading.Event()

        def render(text):
            calls.append(text)
            done.set()

        debounced = Debouncer(render, wait=0.05)
        for text in ("a", "ab", "abc"):
            debounced(text)

        self.assertTrue(done.wait(2))
        time.sleep(0.1)
        self.assertEqual(calls, ["abc"])
        self.assertFalse(debounced.pending)

    def test_cancel_drops_pending_call(self):
        calls = []
        debounced = Debouncer(calls.append, wait=0.05)

        debounced("x")
        debounced.cancel()
        time.sleep(0.15)

        self.assertEqual(calls, [])

    def test_flush_runs_immediately_and_only_once(self):
        calls = []
        debounced = Debouncer(lambda value: calls.append(value) or value, wait=10)

        debounced("now")
        self.assertEqual(debounced.flush(), "now")
        self.assertIsNone(debounced.flush())

        self.assertEqual(calls, ["now"])

    def test_decorator_form(self):
        @debounce(wait=10)
        def handler(value):
            return value * 2

        handler(21)
        self.assertTrue(handler.pending)
        self.assertEqual(handler.flush(), 42)
