from __future__ import annotations

import argparse
import io
import logging
import sys
import unittest
from datetime import datetime
from pathlib import Path

DEFAULT_LOG_DIR = Path("tests") / "testlogs"


def _timestamp(now: datetime | None = None) -> str:
    ts = now or datetime.now()
    return ts.strftime("%Y%m%d_%H%M%S")


def _failure_log_path(log_dir: Path, now: datetime | None = None) -> Path:
    return log_dir / f"test_failures_{_timestamp(now)}.txt"


def _build_failure_report(
    result: unittest.result.TestResult,
    test_output: str,
    log_output: str = "",
) -> str:
    lines: list[str] = []
    lines.append(f"Timestamp: {datetime.now().isoformat(timespec='seconds')}")
    lines.append(
        "Summary: "
        f"ran={result.testsRun}, failures={len(result.failures)}, errors={len(result.errors)}, "
        f"skipped={len(result.skipped)}"
    )
    lines.append("Fix hint: inspect stack traces below, fix failing tests, then rerun this script.")
    lines.append("")
    lines.append(test_output.rstrip())
    if log_output.strip():
        lines.append("")
        lines.append("Captured log records:")
        lines.append(log_output.rstrip())
    lines.append("")
    return "\n".join(lines)


def _write_failure_report(log_dir: Path, content: str, now: datetime | None = None) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    path = _failure_log_path(log_dir, now)
    path.write_text(content, encoding="utf-8")
    return path


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the unittest suite and keep a log of failures.")
    parser.add_argument("--pattern", default="test_*.py", help="test module glob (default: test_*.py)")
    parser.add_argument("--log-dir", type=Path, default=DEFAULT_LOG_DIR, help="where failure reports are written")
    parser.add_argument("--verbosity", type=int, default=2)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    loader = unittest.TestLoader()
    suite = loader.discover(start_dir="tests", pattern=args.pattern)

    # Route application loggers into the report instead of the console.
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    handler.setFormatter(logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    try:
        output = io.StringIO()
        runner = unittest.TextTestRunner(stream=output, verbosity=args.verbosity)
        result = runner.run(suite)
    finally:
        root_logger.removeHandler(handler)

    test_output = output.getvalue()
    sys.stdout.write(test_output)

    if result.wasSuccessful():
        print("All tests passed. No failure log written.")
        return 0

    report = _build_failure_report(result, test_output, log_stream.getvalue())
    log_path = _write_failure_report(args.log_dir, report)
    print(f"Test failures detected. Log written to: {log_path}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
