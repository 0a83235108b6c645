"""Suite orchestrator coordinating test case execution for one artifact."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from verdict_engine.classifier import classify
from verdict_engine.models.outcome import ExitKind
from verdict_engine.models.problem import TestCase
from verdict_engine.models.result import Report, TestResult
from verdict_engine.models.verdict import Verdict
from verdict_engine.runner import LaunchError, ProcessRunner

log = logging.getLogger(__name__)

CaseState = Literal[
    "pending",
    "running",
    "completed",
    "timed_out",
    "killed",
    "launch_failed",
    "classified",
]

EXIT_KIND_TO_STATE: Mapping[ExitKind, CaseState] = {
    "exited": "completed",
    "timed_out": "timed_out",
    "killed": "killed",
}


@dataclass(frozen=True, kw_only=True)
class SuiteOrchestrator:
    """Runs every test case of a suite against one executable artifact.

    The orchestrator owns the artifact for the duration of a run and deletes
    it afterwards, whatever the outcome.
    """

    runner: ProcessRunner = field(default_factory=ProcessRunner)
    max_workers: int = 1

    async def run_suite(
        self,
        executable: Path,
        test_cases: Sequence[TestCase],
        time_limit: float,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> Report:
        """Run all test cases and return the report.

        Args:
            executable: Artifact to run, deleted once the suite finishes
            test_cases: Test cases in the order they must be reported
            time_limit: Per-case wall-clock budget in seconds
            cancel_event: When set, in-flight runs are killed

        Returns:
            Report with one result per test case, in input order

        """
        try:
            if not test_cases:
                log.info("No test cases provided")
                return Report(results=())

            log.info(
                "Running %d test case(s) against %s (time limit %.3fs, workers=%d)",
                len(test_cases),
                executable,
                time_limit,
                self.max_workers,
            )
            semaphore = asyncio.Semaphore(max(1, self.max_workers))
            tasks = [
                self._run_case(
                    semaphore, executable, number, test_case, time_limit, cancel_event
                )
                for number, test_case in enumerate(test_cases, start=1)
            ]

            results = await asyncio.gather(*tasks, return_exceptions=True)
            log.info("Test execution completed")

            return Report(results=tuple(self._process_results(test_cases, results)))
        finally:
            self._cleanup(executable)

    def _process_results(
        self,
        test_cases: Sequence[TestCase],
        results: Sequence[TestResult | BaseException],
    ) -> Sequence[TestResult]:
        """Process results from test execution, handling exceptions."""
        final_results: list[TestResult] = []

        for test_number, (test_case, result) in enumerate(
            zip(test_cases, results, strict=True), start=1
        ):
            if isinstance(result, TestResult):
                log.info(
                    "Test completed: test=%d verdict=%s duration=%dms",
                    result.test_number,
                    result.verdict.status,
                    result.wall_clock_millis,
                )
                final_results.append(result)
            elif isinstance(result, Exception):
                log.error(
                    "Test %d execution failed: %s", test_number, result, exc_info=result
                )
                _log_state(test_number, "classified")
                final_results.append(
                    TestResult(
                        test_number=test_number,
                        verdict=Verdict.internal_error(str(result)),
                        input=test_case.input,
                        expected_output=test_case.output,
                        actual_output="",
                        wall_clock_millis=0,
                    )
                )
            else:
                raise result

        return final_results

    async def _run_case(
        self,
        semaphore: asyncio.Semaphore,
        executable: Path,
        test_number: int,
        test_case: TestCase,
        time_limit: float,
        cancel_event: asyncio.Event | None,
    ) -> TestResult:
        """Run a single test case and classify its outcome."""
        _log_state(test_number, "pending")

        async with semaphore:
            _log_state(test_number, "running")
            try:
                outcome = await self.runner.run(
                    executable,
                    test_case.input,
                    time_limit,
                    cancel_event=cancel_event,
                )
            except LaunchError:
                _log_state(test_number, "launch_failed")
                raise
            _log_state(test_number, EXIT_KIND_TO_STATE[outcome.exit_status.kind])

        verdict = classify(outcome, test_case.output)
        _log_state(test_number, "classified")

        return TestResult(
            test_number=test_number,
            verdict=verdict,
            input=test_case.input,
            expected_output=test_case.output,
            actual_output=outcome.stdout,
            wall_clock_millis=outcome.wall_clock_millis,
            stderr=outcome.stderr,
        )

    def _cleanup(self, executable: Path) -> None:
        """Delete the artifact; failures are logged and never raised."""
        try:
            Path(executable).unlink(missing_ok=True)
        except OSError as e:
            log.warning("Failed to remove artifact %s: %s", executable, e)


def _log_state(test_number: int, state: CaseState) -> None:
    log.debug("Test %d -> %s", test_number, state)
