import json
import logging
import os
import sys
import tempfile
import unittest
from datetime import datetime, timezone
from typing import Optional, get_type_hints
from unittest.mock import MagicMock, patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pipeline_runner
from api_clients.exceptions import FetchError
from config import Settings
from pipeline_runner import JsonFormatter, main, run
from reporting_notification.publishers import GitPublisher


class TestRun(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.settings = Settings(data_root=self.tmp.name, github_token=None)

    def tearDown(self):
        self.tmp.cleanup()

    def test_unknown_mode_is_rejected(self):
        with self.assertRaises(ValueError):
            run("hourly", self.settings, publisher=MagicMock())

    def test_weekly_run_prepares_and_publishes(self):
        publisher = MagicMock()
        now = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)

        result = run("weekly", self.settings, publisher=publisher, now=now)

        publisher.prepare.assert_called_once()
        publisher.publish.assert_called_once_with("weekly snapshot: 2024-epoch-62.csv")
        self.assertEqual(result.pools, 0)
        self.assertTrue(os.path.isdir(os.path.join(self.tmp.name, "data", "weekly-avg")))
        self.assertTrue(os.path.isdir(os.path.join(self.tmp.name, "data", "monthly-avg")))

    @patch('pipeline_runner.PoolsClient')
    def test_daily_run_uses_configured_endpoint(self, mock_client_cls):
        mock_client_cls.return_value.fetch_pools.return_value = []
        settings = Settings(data_root=self.tmp.name, pools_api_url="https://pools.test", http_timeout=5)
        now = datetime(2024, 1, 7, 23, 0, tzinfo=timezone.utc)

        result = run("daily", settings, publisher=MagicMock(), now=now)

        mock_client_cls.assert_called_once_with("https://pools.test", timeout=5)
        self.assertEqual(result.file, "day-7.csv")

    def test_optional_collaborators_are_typed_optional(self):
        hints = get_type_hints(run)
        self.assertEqual(hints['publisher'], Optional[GitPublisher])
        self.assertEqual(hints['now'], Optional[datetime])

    def test_storage_is_a_namespace_package(self):
        import storage
        self.assertIsNone(getattr(storage, '__file__', None))


class TestMain(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.settings = Settings(data_root=self.tmp.name, github_token=None)

    def tearDown(self):
        self.tmp.cleanup()

    def test_unknown_mode_exits_non_zero(self):
        with patch('pipeline_runner.load_settings', return_value=self.settings), \
                patch('pipeline_runner.configure_logging'):
            self.assertEqual(main(["bogus"]), 1)

    @patch('pipeline_runner.PoolsClient')
    def test_daily_fetch_failure_exits_non_zero(self, mock_client_cls):
        mock_client_cls.return_value.fetch_pools.side_effect = FetchError("Request failed")

        with patch('pipeline_runner.load_settings', return_value=self.settings), \
                patch('pipeline_runner.configure_logging'):
            exit_code = main(["daily"])

        self.assertEqual(exit_code, 1)
        slots = [f for f in os.listdir(self.tmp.name) if f.startswith("day-")]
        self.assertEqual(slots, [])

    def test_yearly_without_monthly_files_succeeds(self):
        with patch('pipeline_runner.load_settings', return_value=self.settings), \
                patch('pipeline_runner.configure_logging'):
            self.assertEqual(main(["yearly"]), 0)


class TestLogging(unittest.TestCase):

    def test_json_formatter(self):
        record = logging.LogRecord("snapshots", logging.INFO, __file__, 1, "Saved: %s", ("day-1.csv",), None)
        payload = json.loads(JsonFormatter().format(record))

        self.assertEqual(payload['level'], "INFO")
        self.assertEqual(payload['message'], "Saved: day-1.csv")
        self.assertEqual(payload['name'], "snapshots")

    def test_configure_logging_splits_streams(self):
        root = logging.getLogger()
        saved = root.handlers[:]
        try:
            pipeline_runner.configure_logging("text")
            streams = {h.stream for h in root.handlers}
            self.assertEqual(streams, {sys.stdout, sys.stderr})
        finally:
            for h in root.handlers[:]:
                root.removeHandler(h)
            for h in saved:
                root.addHandler(h)


if __name__ == '__main__':
    unittest.main()
