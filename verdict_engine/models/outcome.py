"""Models for raw process execution outcomes."""

from dataclasses import dataclass
from typing import Literal

ExitKind = Literal["exited", "killed", "timed_out"]


@dataclass(frozen=True, kw_only=True)
class ExitStatus:
    """How a supervised process reached its terminal state."""

    kind: ExitKind
    code: int | None = None
    signal: int | None = None

    @classmethod
    def exited(cls, code: int) -> "ExitStatus":
        return cls(kind="exited", code=code)

    @classmethod
    def killed(cls, signal: int | None = None) -> "ExitStatus":
        return cls(kind="killed", signal=signal)

    @classmethod
    def timed_out(cls) -> "ExitStatus":
        return cls(kind="timed_out")


@dataclass(frozen=True, kw_only=True)
class RunOutcome:
    """Everything observed while running a program once.

    stdout holds whatever was captured before the terminal state, so a
    timed-out run still carries its partial output.
    """

    stdout: str
    stderr: str
    exit_status: ExitStatus
    wall_clock_millis: int
