"""Whitespace canonicalization for output comparison."""

import re

LINE_BREAK = re.compile(r"\r\n|\r|\n")


def normalize(text: str) -> str:
    """Canonicalize program output for comparison.

    Trailing whitespace is stripped from every line, lines are rejoined with
    a single newline, and leading/trailing blank lines are dropped. Only
    \\n, \\r\\n and \\r count as line breaks.
    """
    lines = [line.rstrip() for line in LINE_BREAK.split(text)]
    return "\n".join(lines).strip("\n")


def outputs_match(actual: str, expected: str) -> bool:
    """Check whether two outputs are equal after normalization."""
    return normalize(actual) == normalize(expected)
