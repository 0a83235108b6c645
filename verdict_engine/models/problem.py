"""Models for problem definitions loaded from problem YAML files."""

from collections.abc import Sequence

from pydantic import ConfigDict, Field

from verdict_engine.models.base import Model


class TestCase(Model):
    """Single input/expected-output pair."""

    __test__ = False

    # YAML turns bare values such as `8` into numbers
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    input: str = Field(..., description="Text fed to the program's standard input")
    output: str = Field(..., description="Expected standard output")
    explanation: str | None = Field(
        default=None, description="Optional human-readable explanation"
    )


class ProblemDefinition(Model):
    """Complete problem definition loaded from a problem file."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    version: str = Field(..., description="Problem file schema version")
    name: str | None = Field(default=None, description="Problem title")
    time_limit: str | None = Field(
        default=None, description="Per-case time limit (e.g., '2s', '1500ms')"
    )
    tests: Sequence[TestCase] = Field(
        default_factory=list, description="Ordered sample test cases"
    )
