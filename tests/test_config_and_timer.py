import sys
import os
import json
import shutil
import tempfile
import unittest
from unittest.mock import patch, MagicMock
from datetime import datetime, timedelta, timezone
from io import StringIO

# Add the parent directory to sys.path to import the freshtime package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from freshtime.commands.log import run_log
from freshtime.commands.timer import run_start, run_status, run_stop
from freshtime.config import (
    Config, ProjectConfig, load_config, load_project_config, save_config, save_project_config,
)
from freshtime.errors import ConfigError, ValidationError
from freshtime.timer import TimerState, load_timer, save_timer
from freshtime.utils.format_utils import format_elapsed, format_hours, parse_duration, round_hours


class TestFormatUtils(unittest.TestCase):
    """Test duration parsing and number formatting."""

    def test_parse_duration(self):
        self.assertEqual(parse_duration("2h"), 7200)
        self.assertEqual(parse_duration("30m"), 1800)
        self.assertEqual(parse_duration("1h30m"), 5400)

    def test_parse_duration_rejects(self):
        for value in ["", "90", "1.5h", "m", "30m1h", "2 h"]:
            with self.assertRaises(ValueError, msg=value):
                parse_duration(value)

    def test_round_hours_half_up(self):
        self.assertEqual(round_hours(0.125), 0.13)
        self.assertEqual(round_hours(1000 / 3600), 0.28)
        self.assertEqual(round_hours(-0.125), -0.13)

    def test_format_hours(self):
        self.assertEqual(format_hours(0), "—")
        self.assertEqual(format_hours(2.25), "2.2")
        self.assertEqual(format_hours(3), "3.0")

    def test_format_elapsed(self):
        self.assertEqual(format_elapsed(timedelta(minutes=65)), "1h5m")
        self.assertEqual(format_elapsed(timedelta(minutes=12, seconds=40)), "12m")


class TempConfigDirTestCase(unittest.TestCase):
    """Base class pointing the config directory at a temporary directory."""

    def setUp(self):
        """Set up the temporary config directory."""
        self.temp_dir = tempfile.mkdtemp()
        self.env_patcher = patch.dict('os.environ', {'FRESHTIME_CONFIG_DIR': self.temp_dir})
        self.env_patcher.start()

    def tearDown(self):
        """Clean up the temporary config directory."""
        self.env_patcher.stop()
        shutil.rmtree(self.temp_dir)


class TestConfig(TempConfigDirTestCase):
    """Test loading and saving the user and project config."""

    def test_missing_config(self):
        with self.assertRaises(ConfigError) as ctx:
            load_config()
        self.assertIn("Run `freshtime setup`", str(ctx.exception))

    def test_save_and_load(self):
        save_config(Config("tok", "abc", 77, refresh_token="ref", client_rates={"42": "150"}))

        with open(os.path.join(self.temp_dir, "config.json")) as f:
            raw = json.load(f)
        self.assertEqual(raw["client_rates"], {"42": "150"})
        self.assertNotIn("default_currency", raw)

        config = load_config()
        self.assertEqual(config.business_id, 77)
        self.assertEqual(config.refresh_token, "ref")
        self.assertEqual(config.rate_for(42), "150")
        self.assertIsNone(config.rate_for(7))
        self.assertEqual(config.currency, "USD")

    def test_invalid_config(self):
        with open(os.path.join(self.temp_dir, "config.json"), "w") as f:
            f.write("{not json")
        with self.assertRaises(ConfigError):
            load_config()

    def test_project_config(self):
        self.assertIsNone(load_project_config(self.temp_dir))

        path = save_project_config(ProjectConfig(42, 0, 5), self.temp_dir)

        with open(path) as f:
            self.assertEqual(json.load(f), {"client_id": 42, "service_id": 5})
        project_config = load_project_config(self.temp_dir)
        self.assertEqual(
            (project_config.client_id, project_config.project_id, project_config.service_id), (42, 0, 5)
        )

    def test_project_config_write_error(self):
        not_a_directory = os.path.join(self.temp_dir, "file")
        with open(not_a_directory, "w") as f:
            f.write("")
        with self.assertRaises(ConfigError):
            save_project_config(ProjectConfig(42), not_a_directory)


class TestTimerState(TempConfigDirTestCase):
    """Test persistence of the running timer."""

    def test_no_timer(self):
        self.assertIsNone(load_timer())

    def test_save_and_load(self):
        started = datetime(2026, 2, 9, 9, 0, tzinfo=timezone.utc)
        save_timer(TimerState(started, 42, note="Review", service_id=5, billable=False))

        state = load_timer()

        self.assertEqual(state.started_at, started)
        self.assertEqual(state.note, "Review")
        self.assertEqual(state.project_id, 0)
        self.assertEqual(state.service_id, 5)
        self.assertFalse(state.billable)
        self.assertEqual(state.elapsed(started + timedelta(minutes=5)), timedelta(minutes=5))

    def test_corrupt_timer(self):
        with open(os.path.join(self.temp_dir, "timer.json"), "w") as f:
            f.write('{"note": "no start"}')
        with self.assertRaises(ConfigError):
            load_timer()


@patch('freshtime.commands.common.load_project_config', return_value=ProjectConfig(42, 3, 0))
class TestTimeCommands(TempConfigDirTestCase):
    """Test the log, start, stop and status commands."""

    def setUp(self):
        """Set up config and a mocked client."""
        super().setUp()
        self.config = Config("tok", account_id="abc", business_id=77)
        self.client = MagicMock()
        self.client.post.return_value = {"time_entry": {"id": 555, "duration": 60}}
        self.start = datetime(2026, 2, 9, 9, 0, tzinfo=timezone.utc)

    @patch('sys.stdout', new_callable=StringIO)
    def test_log(self, mock_stdout, mock_project):
        now = datetime(2026, 2, 9, 12, 0, tzinfo=timezone.utc)

        created = run_log("Review", "1h30m", config=self.config, client=self.client, now=now)

        self.assertEqual(created.id, 555)
        path, payload = self.client.post.call_args[0]
        self.assertEqual(path, "/timetracking/business/77/time_entries")
        entry = payload["time_entry"]
        self.assertEqual(entry["started_at"], "2026-02-09T10:30:00Z")
        self.assertEqual(entry["duration"], 5400)
        self.assertEqual(entry["client_id"], 42)
        self.assertEqual(entry["project_id"], 3)
        self.assertEqual(mock_stdout.getvalue().strip(), "Logged 1.50h: Review (entry #555)")

    def test_log_flags_override_project_config(self, mock_project):
        with patch('sys.stdout', new_callable=StringIO):
            run_log("x", "30m", client_id=7, billable=False, config=self.config, client=self.client)
        entry = self.client.post.call_args[0][1]["time_entry"]
        self.assertEqual(entry["client_id"], 7)
        self.assertFalse(entry["billable"])

    def test_log_invalid_duration(self, mock_project):
        with self.assertRaises(ValidationError) as ctx:
            run_log("Review", "1.5h", config=self.config, client=self.client)
        self.assertIn("expected format: 2h, 30m, 1h30m", str(ctx.exception))
        self.client.post.assert_not_called()

    def test_log_without_client(self, mock_project):
        mock_project.return_value = None
        with self.assertRaises(ValidationError):
            run_log("Review", "1h", config=self.config, client=self.client)

    @patch('sys.stdout', new_callable=StringIO)
    def test_start_and_status(self, mock_stdout, mock_project):
        run_start("Review", now=self.start)

        state = run_status(now=self.start + timedelta(minutes=75))

        self.assertEqual(state.client_id, 42)
        output = mock_stdout.getvalue()
        self.assertIn("Running: 1h15m", output)
        self.assertIn("Note:    Review", output)

    @patch('sys.stdout', new_callable=StringIO)
    def test_start_twice(self, mock_stdout, mock_project):
        run_start("Review", now=self.start)
        with self.assertRaises(ValidationError) as ctx:
            run_start("Other", now=self.start + timedelta(minutes=5))
        self.assertIn("Timer already running", str(ctx.exception))

    @patch('sys.stdout', new_callable=StringIO)
    def test_stop_enforces_minimum_duration(self, mock_stdout, mock_project):
        run_start("Quick fix", now=self.start)

        run_stop(config=self.config, client=self.client, now=self.start + timedelta(seconds=30))

        entry = self.client.post.call_args[0][1]["time_entry"]
        self.assertEqual(entry["duration"], 60)
        self.assertEqual(entry["started_at"], "2026-02-09T09:00:00Z")
        self.assertIn("Stopped. Logged 0.02h: Quick fix (entry #555)", mock_stdout.getvalue())
        self.assertIsNone(load_timer())

    @patch('sys.stdout', new_callable=StringIO)
    def test_stop_message_replaces_note(self, mock_stdout, mock_project):
        run_start("", now=self.start)
        run_stop("Wrote docs", config=self.config, client=self.client, now=self.start + timedelta(hours=2))
        entry = self.client.post.call_args[0][1]["time_entry"]
        self.assertEqual(entry["note"], "Wrote docs")
        self.assertEqual(entry["duration"], 7200)

    @patch('sys.stdout', new_callable=StringIO)
    def test_stop_without_note_submits_empty_note(self, mock_stdout, mock_project):
        run_start(now=self.start)
        run_stop(config=self.config, client=self.client, now=self.start + timedelta(minutes=30))
        entry = self.client.post.call_args[0][1]["time_entry"]
        self.assertEqual(entry["note"], "")
        self.assertEqual(entry["duration"], 1800)
        self.assertIsNone(load_timer())

    @patch('sys.stdout', new_callable=StringIO)
    def test_stop_keeps_timer_when_submit_fails(self, mock_stdout, mock_project):
        run_start("Review", now=self.start)
        self.client.post.side_effect = ConfigError("boom")

        with self.assertRaises(ConfigError):
            run_stop(config=self.config, client=self.client, now=self.start + timedelta(hours=1))
        self.assertIsNotNone(load_timer())

    def test_stop_without_timer(self, mock_project):
        with self.assertRaises(ValidationError):
            run_stop(config=self.config, client=self.client)

    @patch('sys.stdout', new_callable=StringIO)
    def test_status_without_timer(self, mock_stdout, mock_project):
        self.assertIsNone(run_status())
        self.assertIn("No timer running.", mock_stdout.getvalue())


if __name__ == '__main__':
    unittest.main()
