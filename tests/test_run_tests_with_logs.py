import tempfile
import unittest
from datetime import datetime
from pathlib import Path

import run_tests_with_logs as runner


class TestRunTestsWithLogs(unittest.TestCase):
    def test_failure_log_path_is_timestamped(self):
        path = runner._failure_log_path(runner.DEFAULT_LOG_DIR, datetime(2026, 2, 8, 13, 45, 7))
        self.assertEqual(
            path.name,
            "test_failures_20260208_134507.txt",
            "Failure log filename format mismatch. "
            "Fix: use test_failures_YYYYMMDD_HHMMSS.txt naming.",
        )

    def test_write_failure_report_creates_text_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_dir = Path(tmp) / "testlogs"
            path = runner._write_failure_report(log_dir, "example failure report", datetime(2026, 2, 8, 13, 45, 7))
            self.assertTrue(path.exists())
            self.assertEqual(path.read_text(encoding="utf-8"), "example failure report")

    def test_build_failure_report_includes_summary_and_logs(self):
        result = unittest.TestResult()
        result.testsRun = 3
        result.failures = [("test_case", "traceback")]
        result.errors = []
        result.skipped = [("gui_case", "Tk GUI not available")]

        report = runner._build_failure_report(
            result,
            "sample unittest output",
            "WARNING deactivation_guard: form has no can_deactivate()",
        )
        self.assertIn("Summary: ran=3, failures=1, errors=0, skipped=1", report)
        self.assertIn("Fix hint:", report)
        self.assertIn("sample unittest output", report)
        self.assertIn("Captured log records:", report)

    def test_report_omits_empty_log_section(self):
        report = runner._build_failure_report(unittest.TestResult(), "output")
        self.assertNotIn("Captured log records:", report)

    def test_command_line_options(self):
        args = runner._parse_args(["--pattern", "test_visit_*.py", "--log-dir", "out"])
        self.assertEqual(args.pattern, "test_visit_*.py")
        self.assertEqual(args.log_dir, Path("out"))
        self.assertEqual(runner._parse_args([]).log_dir, runner.DEFAULT_LOG_DIR)


if __name__ == "__main__":
    unittest.main()
