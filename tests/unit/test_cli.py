"""Tests for CLI module."""

import json
import logging
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from verdict_engine.builders.base import CompileError
from verdict_engine.cli import format_output, log_results_summary, parse_duration, run
from verdict_engine.models.problem import ProblemDefinition, TestCase
from verdict_engine.models.result import Report, TestResult
from verdict_engine.models.verdict import Verdict
from verdict_engine.testing.factories import ProblemDefinitionFactory


def make_result(
    test_number: int, verdict: Verdict, actual_output: str = ""
) -> TestResult:
    """Create a test result with fixed input/output."""
    return TestResult(
        test_number=test_number,
        verdict=verdict,
        input="8",
        expected_output="YES",
        actual_output=actual_output,
        wall_clock_millis=15,
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2s", 2.0),
        ("1500ms", 1.5),
        ("1m", 60.0),
        ("2.5", 2.5),
        (" 3 s ", 3.0),
    ],
)
def test_parse_duration(value: str, expected: float) -> None:
    """Parses durations with optional units."""
    assert parse_duration(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "fast", "2h", "-1s", "0s"])
def test_parse_duration_rejects_invalid(value: str) -> None:
    """Rejects unknown formats and non-positive values."""
    with pytest.raises(ValueError):
        parse_duration(value)


def test_log_results_summary_accepted(caplog: pytest.LogCaptureFixture) -> None:
    """Logs accepted results without failure details."""
    report = Report(results=(make_result(1, Verdict.accepted(), "YES"),))

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), report)

    assert "Test Results: 1/1 passed" in caplog.text
    assert "✅ Test 1: Accepted (15ms)" in caplog.text
    assert "Expected Output" not in caplog.text


def test_log_results_summary_wrong_answer(caplog: pytest.LogCaptureFixture) -> None:
    """Logs input, expected and actual output for failures."""
    report = Report(results=(make_result(1, Verdict.wrong_answer(), "NO"),))

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), report)

    assert "Test Results: 0/1 passed" in caplog.text
    assert "❌ Test 1: Wrong Answer (15ms)" in caplog.text
    assert "Expected Output:\nYES" in caplog.text
    assert "Actual Output:\nNO" in caplog.text


def test_log_results_summary_timeout_shows_partial_output(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Partial output of a timed-out run is shown."""
    report = Report(
        results=(make_result(1, Verdict.time_limit_exceeded(), "partial"),)
    )

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), report)

    assert "Test 1: Time Limit Exceeded" in caplog.text
    assert "Actual Output:\npartial" in caplog.text


def test_format_output_empty() -> None:
    """Returns empty totals when no results."""
    output = format_output(Report(results=()))

    assert output == {
        "total": 0,
        "passed": 0,
        "wrong_answers": 0,
        "runtime_errors": 0,
        "timeouts": 0,
        "internal_errors": 0,
        "results": [],
    }


def test_format_output_mixed_results() -> None:
    """Formats mixed results with correct totals."""
    report = Report(
        results=(
            make_result(1, Verdict.accepted(), "YES"),
            make_result(2, Verdict.wrong_answer(), "NO"),
            make_result(3, Verdict.runtime_error(3)),
            make_result(4, Verdict.time_limit_exceeded()),
            make_result(5, Verdict.internal_error("missing")),
        )
    )

    output = format_output(report)

    assert output["total"] == 5
    assert output["passed"] == 1
    assert output["wrong_answers"] == 1
    assert output["runtime_errors"] == 1
    assert output["timeouts"] == 1
    assert output["internal_errors"] == 1
    assert [r["test_number"] for r in output["results"]] == [1, 2, 3, 4, 5]
    assert output["results"][2]["exit_code"] == 3
    assert output["results"][4]["detail"] == "missing"
    assert output["results"][1]["actual_output"] == "NO"


class TestRun:
    """Tests for run function."""

    @pytest.fixture
    def builder(self, tmp_path: Path) -> Mock:
        """Create mock builder producing an artifact in tmp_path."""
        artifact = tmp_path / "artifact"
        artifact.write_text("binary")
        builder = Mock()
        builder.build = AsyncMock(return_value=artifact)
        return builder

    @pytest.fixture
    def manifest(self, builder: Mock) -> Mock:
        """Create mock manifest returning the mock builder."""
        manifest = Mock()
        manifest.config_cls = Mock(return_value=Mock())
        manifest.builder_factory = Mock(return_value=builder)
        return manifest

    async def test_returns_zero_when_no_test_cases(
        self,
        manifest: Mock,
        builder: Mock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Returns 0 and prints empty results without building."""
        with (
            patch("verdict_engine.cli.load_builder_manifest", return_value=manifest),
            patch(
                "verdict_engine.cli.load_problem",
                new_callable=AsyncMock,
                return_value=ProblemDefinition(version="1.0", tests=[]),
            ),
        ):
            exit_code = await run(
                source=Path("solution.cpp"), problem_path=Path("problem.yaml")
            )

        assert exit_code == 0
        assert '"total": 0' in capsys.readouterr().out
        builder.build.assert_not_called()

    async def test_returns_two_on_compile_error(
        self,
        manifest: Mock,
        builder: Mock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Surfaces the compiler diagnostic verbatim and runs nothing."""
        builder.build.side_effect = CompileError("error: expected ';'")

        with (
            patch("verdict_engine.cli.load_builder_manifest", return_value=manifest),
            patch(
                "verdict_engine.cli.load_problem",
                new_callable=AsyncMock,
                return_value=ProblemDefinitionFactory.build(),
            ),
            patch("verdict_engine.cli.SuiteOrchestrator") as orchestrator_cls,
        ):
            exit_code = await run(
                source=Path("solution.cpp"), problem_path=Path("problem.yaml")
            )

        assert exit_code == 2
        output = json.loads(capsys.readouterr().out)
        assert output == {"compile_error": "error: expected ';'"}
        orchestrator_cls.assert_not_called()

    async def test_returns_zero_when_all_accepted(
        self,
        manifest: Mock,
        builder: Mock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Returns 0 when every test case is accepted."""
        problem = ProblemDefinition(
            version="1.0", tests=[TestCase(input="8", output="YES")]
        )
        report = Report(results=(make_result(1, Verdict.accepted(), "YES"),))

        with (
            patch("verdict_engine.cli.load_builder_manifest", return_value=manifest),
            patch(
                "verdict_engine.cli.load_problem",
                new_callable=AsyncMock,
                return_value=problem,
            ),
            patch("verdict_engine.cli.SuiteOrchestrator") as orchestrator_cls,
        ):
            orchestrator_cls.return_value.run_suite = AsyncMock(return_value=report)

            exit_code = await run(
                source=Path("solution.cpp"),
                problem_path=Path("problem.yaml"),
                builder_config_json='{"std": "c++20"}',
            )

        assert exit_code == 0
        manifest.config_cls.assert_called_once_with(std="c++20")
        run_suite = orchestrator_cls.return_value.run_suite
        args = run_suite.call_args.args
        assert args[0] == builder.build.return_value
        assert args[1] == problem.tests
        assert args[2] == pytest.approx(2.0)
        assert json.loads(capsys.readouterr().out)["passed"] == 1

    async def test_returns_one_on_failures(
        self,
        manifest: Mock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Returns 1 when any test case is not accepted."""
        report = Report(
            results=(
                make_result(1, Verdict.accepted(), "YES"),
                make_result(2, Verdict.runtime_error(1)),
            )
        )

        with (
            patch("verdict_engine.cli.load_builder_manifest", return_value=manifest),
            patch(
                "verdict_engine.cli.load_problem",
                new_callable=AsyncMock,
                return_value=ProblemDefinitionFactory.build(),
            ),
            patch("verdict_engine.cli.SuiteOrchestrator") as orchestrator_cls,
        ):
            orchestrator_cls.return_value.run_suite = AsyncMock(return_value=report)

            exit_code = await run(
                source=Path("solution.cpp"), problem_path=Path("problem.yaml")
            )

        assert exit_code == 1
        output = json.loads(capsys.readouterr().out)
        assert output["total"] == 2
        assert output["runtime_errors"] == 1

    async def test_time_limit_precedence(
        self,
        manifest: Mock,
    ) -> None:
        """The CLI limit overrides the problem's, which overrides the default."""
        problem = ProblemDefinition(
            version="1.0", time_limit="1s", tests=[TestCase(input="1", output="1")]
        )
        report = Report(results=(make_result(1, Verdict.accepted()),))

        with (
            patch("verdict_engine.cli.load_builder_manifest", return_value=manifest),
            patch(
                "verdict_engine.cli.load_problem",
                new_callable=AsyncMock,
                return_value=problem,
            ),
            patch("verdict_engine.cli.SuiteOrchestrator") as orchestrator_cls,
        ):
            orchestrator_cls.return_value.run_suite = AsyncMock(return_value=report)

            await run(source=Path("a.cpp"), problem_path=Path("p.yaml"))
            await run(
                source=Path("a.cpp"), problem_path=Path("p.yaml"), time_limit="250ms"
            )

        calls = orchestrator_cls.return_value.run_suite.call_args_list
        assert calls[0].args[2] == pytest.approx(1.0)
        assert calls[1].args[2] == pytest.approx(0.25)
