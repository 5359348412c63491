"""Data models for the checkmate check framework.

Defines the compiled check definitions (:class:`Check`, :class:`CheckSet`)
and the per-run outcomes (:class:`CheckResult`, :class:`CheckSummary`).
Definitions are compiled once and reused across runs; results are created
fresh by every run and hold no reference to the data they were computed
from.
"""

from __future__ import annotations

import functools
import time
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

MESSAGE_ALL_PASSED = "All rows passed"


class Check(BaseModel):
    """A named predicate bound to an ordered list of columns."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name, unique within its check set.")
    predicate: Callable[..., Any] = Field(
        ...,
        description="Callable taking one value per column; a falsy return or an exception fails the row.",
    )
    columns: tuple[str, ...] = Field(
        ...,
        description="Column identifiers in first-occurrence order, one per predicate argument.",
    )

    def evaluate(self, values: tuple[Any, ...]) -> bool:
        """Invoke the predicate with one row's values.

        Exceptions raised by the predicate, or by converting its outcome
        to ``bool``, propagate to the caller.
        """
        return bool(self.predicate(*values))


class CheckSet(BaseModel):
    """An ordered, named collection of checks."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Descriptive name of the check set.")
    checks: tuple[Check, ...] = Field(
        default_factory=tuple,
        description="Checks in declaration order.",
    )

    def __len__(self) -> int:
        return len(self.checks)

    def __str__(self) -> str:
        from checkmate.checks.reporting import render_checkset

        return render_checkset(self)


@functools.total_ordering
class CheckResult(BaseModel):
    """The outcome of evaluating one check against a data source.

    Results are ordered for display only: a failed result sorts before a
    passed one, and among results with the same status the one with more
    failing rows sorts first.
    """

    model_config = ConfigDict(frozen=True)

    passed: bool = Field(..., description="True iff no row failed and the column precondition held.")
    failing_rows: list[int] = Field(
        default_factory=list,
        description="1-based positions of failing rows, ascending.",
    )
    failing_values: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Per failing row, a mapping of column to value, aligned with failing_rows.",
    )
    message: str = Field(default="", description="Short diagnostic text.")
    total_rows: int = Field(..., ge=0, description="Rows evaluated; 0 when the precondition failed.")

    @model_validator(mode="after")
    def _check_consistency(self) -> CheckResult:
        if len(self.failing_rows) != len(self.failing_values):
            raise ValueError(
                f"failing_rows ({len(self.failing_rows)}) and failing_values "
                f"({len(self.failing_values)}) must have the same length"
            )
        previous = 0
        for row in self.failing_rows:
            if row <= previous or row > self.total_rows:
                raise ValueError(
                    f"failing row {row} must be ascending and within [1, {self.total_rows}]"
                )
            previous = row
        if self.passed and self.failing_rows:
            raise ValueError("a passed result cannot have failing rows")
        if not self.passed and not self.failing_rows and self.total_rows != 0:
            raise ValueError("a failed result without failing rows must have total_rows == 0")
        return self

    @property
    def failure_count(self) -> int:
        return len(self.failing_rows)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CheckResult):
            return NotImplemented
        if self.passed != other.passed:
            return other.passed
        return self.failure_count > other.failure_count

    @staticmethod
    def from_failures(
        failing_rows: list[int],
        failing_values: list[dict[str, Any]],
        total_rows: int,
    ) -> CheckResult:
        """Build a result from the failures collected over *total_rows* rows."""
        passed = not failing_rows
        return CheckResult(
            passed=passed,
            failing_rows=failing_rows,
            failing_values=failing_values,
            message=MESSAGE_ALL_PASSED if passed else f"{len(failing_rows)} rows failed",
            total_rows=total_rows,
        )

    @staticmethod
    def precondition_failed(message: str) -> CheckResult:
        """Build a failed result for a check whose rows were never evaluated."""
        return CheckResult(passed=False, message=message, total_rows=0)


class CheckSummary(BaseModel):
    """Aggregated outcome of running a check set once."""

    model_config = ConfigDict(frozen=True)

    checkset_name: str = Field(..., description="Name of the check set that was run.")
    check_results: dict[str, CheckResult] = Field(
        default_factory=dict,
        description="Result per check name, in declaration order.",
    )
    time_elapsed: float = Field(default=0.0, ge=0.0, description="Wall-clock duration of the run in seconds.")

    def __str__(self) -> str:
        from checkmate.checks.reporting import render_summary

        return render_summary(self)


class Timer:
    """Simple monotonic timer for measuring run duration."""

    def __init__(self) -> None:
        self._start: float = 0.0

    def start(self) -> None:
        self._start = time.monotonic()

    def elapsed_seconds(self) -> float:
        return max(0.0, time.monotonic() - self._start)
