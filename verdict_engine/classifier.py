"""Classification of raw run outcomes into verdicts."""

from verdict_engine.models.outcome import RunOutcome
from verdict_engine.models.verdict import Verdict
from verdict_engine.normalizer import outputs_match

KILLED_DETAIL = "terminated unexpectedly"


def classify(outcome: RunOutcome, expected: str) -> Verdict:
    """Derive the verdict for one run.

    Termination checks come first: a non-zero exit is always a runtime
    error, never a wrong answer, and output is only compared for clean exits.
    """
    status = outcome.exit_status

    if status.kind == "timed_out":
        return Verdict.time_limit_exceeded()

    if status.kind == "killed":
        if status.signal is not None:
            return Verdict.internal_error(f"{KILLED_DETAIL} (signal {status.signal})")
        return Verdict.internal_error(KILLED_DETAIL)

    if status.code != 0:
        return Verdict.runtime_error(status.code if status.code is not None else -1)

    if outputs_match(outcome.stdout, expected):
        return Verdict.accepted()

    return Verdict.wrong_answer()
