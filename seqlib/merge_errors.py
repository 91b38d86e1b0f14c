"""
Merge precondition errors and tuning limits.
"""

from __future__ import annotations

import os
from typing import Any

DEFAULT_BUFFER_THRESHOLD = 8
BUFFER_THRESHOLD_ENV = "SEQLIB_BUFFER_THRESHOLD"
EXPENSIVE_CHECKS_ENV = "SEQLIB_EXPENSIVE_CHECKS"
RUN_LENGTH_MISMATCH_MESSAGE = "Run length does not match the distance between its positions."

# Overrides the environment when set to True/False.
EXPENSIVE_CHECKS: bool | None = None


class MergePreconditionError(AssertionError):
    """
    Raised when expensive checks are enabled and a merge is called with run
    lengths that disagree with the positions describing the runs.
    """

    def __init__(
        self,
        message: str = RUN_LENGTH_MISMATCH_MESSAGE,
        *,
        expected: int | None = None,
        observed: int | None = None,
        context: str | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.observed = observed
        self.context = context


class IncompatiblePositionsError(ValueError):
    """Raised when positions from different containers are combined."""

    def __init__(self, message: str, *, context: str | None = None) -> None:
        super().__init__(message)
        self.context = context


def resolve_buffer_threshold(
    options: Any = None,
    attr_name: str = "buffer_threshold",
    *,
    explicit: Any = None,
) -> int:
    """
    Resolve the scratch-buffer allocation threshold.

    Priority:
    1) explicit (the buffer_threshold= keyword of a merge call)
    2) options.<attr_name>
    3) env SEQLIB_BUFFER_THRESHOLD
    4) DEFAULT_BUFFER_THRESHOLD

    Negative or non-integer values resolve to the default; 0 is valid.
    """
    raw = explicit
    if raw is None and options is not None:
        raw = getattr(options, attr_name, None)
    if raw is None:
        raw = os.getenv(BUFFER_THRESHOLD_ENV)
    if raw is None:
        return DEFAULT_BUFFER_THRESHOLD

    try:
        threshold = int(raw)
        if threshold >= 0:
            return threshold
    except (TypeError, ValueError):
        pass
    return DEFAULT_BUFFER_THRESHOLD


def expensive_checks_enabled() -> bool:
    """Module flag first, then env SEQLIB_EXPENSIVE_CHECKS."""
    if EXPENSIVE_CHECKS is not None:
        return EXPENSIVE_CHECKS
    raw = os.getenv(EXPENSIVE_CHECKS_ENV, "")
    return raw.strip().lower() in ("1", "true", "yes", "on")


def check_run_length(first: Any, last: Any, expected: int, context: str) -> None:
    """
    Assert ``distance(first, last) == expected``.

    Linear on non-random-access positions; callers only invoke it when
    ``expensive_checks_enabled()`` was true at the start of the merge.
    """
    observed = first.distance_to(last)
    if observed != expected:
        raise MergePreconditionError(
            f"{RUN_LENGTH_MISMATCH_MESSAGE} ({context}: expected {expected}, got {observed})",
            expected=expected,
            observed=observed,
            context=context,
        )
