"""Tests for the host-facing data provider."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
import unittest
from unittest.mock import MagicMock
import sys
from pathlib import Path

# Add src to path so we can import gatewatch
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gatewatch.config import GateConfig
from gatewatch.models import ComplicationRequest, ComplicationType, DisplayText
from gatewatch.provider import DataProvider, GateCrossingProvider


class TestGateCrossingProvider(unittest.TestCase):
    """Test trigger, preview and lifecycle handling."""

    def setUp(self):
        self.tracker = MagicMock()
        self.tracker.config = GateConfig(fetch_timeout=1.0, request_timeout=2.0)
        self.tracker.get_display.return_value = DisplayText("08:00›08:05", "Gate closes at 08:05")
        self.provider = GateCrossingProvider(tracker=self.tracker)

    def tearDown(self):
        self.provider.shutdown()

    def test_is_data_provider(self):
        self.assertIsInstance(self.provider, DataProvider)

    def test_preview_short_text(self):
        preview = self.provider.get_preview(ComplicationType.SHORT_TEXT)
        self.assertEqual(preview.primary_text, "00:00›00:00")
        self.tracker.get_display.assert_not_called()

    def test_preview_unsupported_type(self):
        self.assertIsNone(self.provider.get_preview(ComplicationType.LONG_TEXT))

    def test_trigger_declines_unsupported_type(self):
        request = ComplicationRequest(instance_id=1, complication_type=ComplicationType.RANGED_VALUE)
        self.assertIsNone(self.provider.handle_trigger(request))
        self.tracker.get_display.assert_not_called()

    def test_trigger_returns_display(self):
        request = ComplicationRequest(instance_id=1, complication_type=ComplicationType.SHORT_TEXT)

        display = self.provider.handle_trigger(request)

        self.assertEqual(display.primary_text, "08:00›08:05")
        self.tracker.get_display.assert_called_once()

    def test_trigger_renders_unexpected_error(self):
        """Exceptions from the pipeline never reach the host."""
        self.tracker.get_display.side_effect = RuntimeError("boom")
        request = ComplicationRequest(instance_id=1, complication_type=ComplicationType.SHORT_TEXT)

        display = self.provider.handle_trigger(request)

        self.assertTrue(display.primary_text.endswith("ERR"))

    def test_trigger_times_out(self):
        release = threading.Event()

        def slow_display(now):
            release.wait(5)
            return DisplayText("late", "late")

        self.tracker.get_display.side_effect = slow_display
        provider = GateCrossingProvider(GateConfig(fetch_timeout=0.1, request_timeout=0.1), tracker=self.tracker)
        request = ComplicationRequest(instance_id=1, complication_type=ComplicationType.SHORT_TEXT)

        try:
            display = provider.handle_trigger(request)
        finally:
            release.set()
            provider.shutdown()

        self.assertTrue(display.primary_text.endswith("ERR"))

    def test_deactivate_abandons_pending_request(self):
        started = threading.Event()
        release = threading.Event()
        results = []

        def slow_display(now):
            started.set()
            release.wait(5)
            return DisplayText("late", "late")

        self.tracker.get_display.side_effect = slow_display
        request = ComplicationRequest(instance_id=7, complication_type=ComplicationType.SHORT_TEXT)

        worker = threading.Thread(target=lambda: results.append(self.provider.handle_trigger(request)))
        worker.start()
        self.assertTrue(started.wait(2))

        self.provider.on_deactivate(7)
        release.set()
        worker.join(5)

        self.assertEqual(results, [None])

    def test_stuck_fetches_do_not_block_later_triggers(self):
        """Requests abandoned after a timeout leave room for the next one."""
        release = threading.Event()
        calls = []

        def display(now):
            calls.append(now)
            if len(calls) <= 2:
                release.wait(5)
                return DisplayText("late", "late")
            return DisplayText("08:00›08:05", "Gate closes at 08:05")

        self.tracker.get_display.side_effect = display
        provider = GateCrossingProvider(GateConfig(fetch_timeout=0.2, request_timeout=0.2), tracker=self.tracker)
        request = ComplicationRequest(instance_id=1, complication_type=ComplicationType.SHORT_TEXT)

        try:
            results = [provider.handle_trigger(request).primary_text for _ in range(3)]
        finally:
            release.set()
            provider.shutdown()

        self.assertTrue(results[0].endswith("ERR"))
        self.assertTrue(results[1].endswith("ERR"))
        self.assertEqual(results[2], "08:00›08:05")

    def test_deactivate_cancels_queued_request(self):
        """A request still waiting for a worker is cancelled and never runs."""
        executor = ThreadPoolExecutor(max_workers=1)
        release = threading.Event()
        executor.submit(release.wait, 5)
        provider = GateCrossingProvider(tracker=self.tracker, executor=executor)
        request = ComplicationRequest(instance_id=9, complication_type=ComplicationType.SHORT_TEXT)
        results = []

        worker = threading.Thread(target=lambda: results.append(provider.handle_trigger(request)))
        worker.start()
        deadline = time.monotonic() + 2
        while 9 not in provider._pending and time.monotonic() < deadline:
            time.sleep(0.01)

        provider.on_deactivate(9)
        worker.join(5)
        release.set()
        provider.shutdown()

        self.assertEqual(results, [None])
        self.tracker.get_display.assert_not_called()

    def test_activation_tracking(self):
        self.provider.on_activate(3, ComplicationType.SHORT_TEXT)
        self.assertIn(3, self.provider.active_instances)

        self.provider.on_deactivate(3)
        self.assertNotIn(3, self.provider.active_instances)

    def test_deactivate_unknown_instance(self):
        self.provider.on_deactivate(42)
        self.assertNotIn(42, self.provider.active_instances)


if __name__ == "__main__":
    unittest.main()
