"""CLI entry point for running a program against a problem's sample tests."""

import argparse
import asyncio
import json
import logging
import re
import signal
import sys
from contextlib import suppress
from pathlib import Path
from typing import Any

from verdict_engine.builders.base import CompileError
from verdict_engine.builders.loading import available_builders, load_builder_manifest
from verdict_engine.models.result import Report
from verdict_engine.orchestrator import SuiteOrchestrator
from verdict_engine.problem_loader import load_problem
from verdict_engine.runner import ProcessRunner

DEFAULT_TIME_LIMIT = "2s"

STATUS_SYMBOLS = {
    "accepted": "✅",
    "wrong_answer": "❌",
    "runtime_error": "💥",
    "time_limit_exceeded": "⏱️",
    "internal_error": "❗",
}

DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m)?\s*$")
DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0}


def parse_duration(value: str) -> float:
    """Parse a duration such as '2s', '1500ms' or '1m' into seconds.

    Bare numbers are taken as seconds.
    """
    match = DURATION_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid duration: '{value}'")

    amount, unit = match.groups()
    seconds = float(amount) * DURATION_UNITS[unit or "s"]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: '{value}'")
    return seconds


def log_results_summary(log: logging.Logger, report: Report) -> None:
    """Log a formatted summary of test results with failure details."""
    log.info("=" * 80)
    log.info("Test Results: %d/%d passed", report.passed, report.total)
    log.info("=" * 80)

    for result in report.results:
        symbol = STATUS_SYMBOLS.get(result.verdict.status, "?")
        log.info(
            "%s Test %d: %s (%dms)",
            symbol,
            result.test_number,
            result.verdict.label,
            result.wall_clock_millis,
        )
        if result.verdict.passed:
            continue

        log.info("  Input:\n%s", result.input)
        log.info("  Expected Output:\n%s", result.expected_output)
        log.info("  Actual Output:\n%s", result.actual_output)
        if result.stderr:
            log.info("  Stderr:\n%s", result.stderr)


def format_output(report: Report) -> dict[str, Any]:
    """Format a report for JSON output."""
    results: list[dict[str, Any]] = [
        {
            "test_number": result.test_number,
            "verdict": result.verdict.status,
            "label": result.verdict.label,
            "exit_code": result.verdict.exit_code,
            "detail": result.verdict.detail,
            "duration_ms": result.wall_clock_millis,
            "input": result.input,
            "expected_output": result.expected_output,
            "actual_output": result.actual_output,
            "stderr": result.stderr,
        }
        for result in report.results
    ]

    return {
        "total": report.total,
        "passed": report.passed,
        "wrong_answers": sum(1 for r in results if r["verdict"] == "wrong_answer"),
        "runtime_errors": sum(1 for r in results if r["verdict"] == "runtime_error"),
        "timeouts": sum(1 for r in results if r["verdict"] == "time_limit_exceeded"),
        "internal_errors": sum(
            1 for r in results if r["verdict"] == "internal_error"
        ),
        "results": results,
    }


async def run(
    source: Path,
    problem_path: Path,
    builder_key: str = "gpp",
    builder_config_json: str = "{}",
    time_limit: str | None = None,
    workers: int = 1,
) -> int:
    """Build the source, run the problem's tests and return exit code."""
    log = logging.getLogger("verdict_engine")

    log.info("Loading builder: %s", builder_key)
    manifest = load_builder_manifest(builder_key)

    config_dict = json.loads(builder_config_json)
    config = manifest.config_cls(**config_dict)
    builder = manifest.builder_factory(config)

    log.info("Loading problem: %s", problem_path)
    problem = await load_problem(problem_path)
    limit = parse_duration(time_limit or problem.time_limit or DEFAULT_TIME_LIMIT)

    if not problem.tests:
        log.info("No test cases found in %s", problem_path)
        print(json.dumps(format_output(Report(results=()))))
        return 0

    log.info("Building %s", source)
    try:
        executable = await builder.build(source)
    except CompileError as e:
        log.error("Compilation failed:\n%s", e.diagnostic)
        print(json.dumps({"compile_error": e.diagnostic}, indent=2))
        return 2

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    with suppress(NotImplementedError, RuntimeError):
        loop.add_signal_handler(signal.SIGTERM, cancel_event.set)

    try:
        orchestrator = SuiteOrchestrator(runner=ProcessRunner(), max_workers=workers)
        report = await orchestrator.run_suite(
            executable, problem.tests, limit, cancel_event=cancel_event
        )
    finally:
        with suppress(NotImplementedError, RuntimeError):
            loop.remove_signal_handler(signal.SIGTERM)

    log_results_summary(log, report)
    print(json.dumps(format_output(report), indent=2))

    return 0 if report.all_passed else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run a program against a problem's sample tests"
    )
    parser.add_argument(
        "--source",
        type=Path,
        required=True,
        help="Path to the program source (or executable for 'prebuilt')",
    )
    parser.add_argument(
        "--problem",
        type=Path,
        required=True,
        help="Path to the problem YAML file with sample tests",
    )
    parser.add_argument(
        "--builder",
        default="gpp",
        help=f"Builder key ({', '.join(available_builders())})",
    )
    parser.add_argument(
        "--builder-config",
        default="{}",
        help="JSON configuration for the builder",
    )
    parser.add_argument(
        "--time-limit",
        default=None,
        help=f"Per-test time limit, e.g. '2s' or '1500ms' "
        f"(default: problem's limit or {DEFAULT_TIME_LIMIT})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of test cases to run concurrently",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            source=args.source,
            problem_path=args.problem,
            builder_key=args.builder,
            builder_config_json=args.builder_config,
            time_limit=args.time_limit,
            workers=args.workers,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
