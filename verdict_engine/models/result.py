"""Models for test suite results."""

from dataclasses import dataclass

from verdict_engine.models.verdict import Verdict


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of running the program against a single test case."""

    __test__ = False

    test_number: int
    verdict: Verdict
    input: str
    expected_output: str
    actual_output: str
    wall_clock_millis: int
    stderr: str = ""


@dataclass(frozen=True, kw_only=True)
class Report:
    """Ordered results of a suite run.

    Results follow the order of the supplied test cases, one per case.
    """

    results: tuple[TestResult, ...]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for result in self.results if result.verdict.passed)

    @property
    def all_passed(self) -> bool:
        return self.passed == self.total
