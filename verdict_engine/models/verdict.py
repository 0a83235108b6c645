"""Verdict taxonomy for a single test case."""

from dataclasses import dataclass
from typing import Literal

VerdictStatus = Literal[
    "accepted",
    "wrong_answer",
    "runtime_error",
    "time_limit_exceeded",
    "internal_error",
]


@dataclass(frozen=True, kw_only=True)
class Verdict:
    """Classified outcome of running a program against one test case.

    exit_code is only set for runtime errors and detail only for internal
    errors, where it carries diagnostics and never drives classification.
    """

    status: VerdictStatus
    exit_code: int | None = None
    detail: str | None = None

    @classmethod
    def accepted(cls) -> "Verdict":
        return cls(status="accepted")

    @classmethod
    def wrong_answer(cls) -> "Verdict":
        return cls(status="wrong_answer")

    @classmethod
    def runtime_error(cls, exit_code: int) -> "Verdict":
        return cls(status="runtime_error", exit_code=exit_code)

    @classmethod
    def time_limit_exceeded(cls) -> "Verdict":
        return cls(status="time_limit_exceeded")

    @classmethod
    def internal_error(cls, detail: str) -> "Verdict":
        return cls(status="internal_error", detail=detail)

    @property
    def passed(self) -> bool:
        return self.status == "accepted"

    @property
    def label(self) -> str:
        """Human-readable verdict name."""
        match self.status:
            case "accepted":
                return "Accepted"
            case "wrong_answer":
                return "Wrong Answer"
            case "runtime_error":
                return f"Runtime Error (exit code {self.exit_code})"
            case "time_limit_exceeded":
                return "Time Limit Exceeded"
            case "internal_error":
                return f"Internal Error: {self.detail}"
