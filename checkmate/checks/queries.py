"""Query accessors over check sets and run summaries.

All functions are pure.  Lookups by check name raise
:class:`CheckNotFoundError` rather than defaulting to an empty or zero
value, since an unknown name is always a caller mistake.

Pass rates are row-based in both forms: the per-check rate is the share of
evaluated rows that passed that check, and the aggregate rate is the share
of rows that passed every check.
"""

from __future__ import annotations

from checkmate.checks.exceptions import CheckNotFoundError
from checkmate.checks.models import CheckResult, CheckSet, CheckSummary


def _result(summary: CheckSummary, name: str) -> CheckResult:
    try:
        return summary.check_results[name]
    except KeyError:
        raise CheckNotFoundError(name, summary.checkset_name) from None


def failed_checks(summary: CheckSummary) -> list[str]:
    """Names of the checks that did not pass."""
    return [name for name, result in summary.check_results.items() if not result.passed]


def passed_checks(summary: CheckSummary) -> list[str]:
    """Names of the checks that passed."""
    return [name for name, result in summary.check_results.items() if result.passed]


def total_failures(summary: CheckSummary) -> int:
    """Total number of failing rows across all checks, counted per check."""
    return sum(len(result.failing_rows) for result in summary.check_results.values())


def execution_time(summary: CheckSummary) -> float:
    """Wall-clock duration of the run in seconds."""
    return summary.time_elapsed


def _rate(passed_rows: int, total_rows: int) -> float:
    return round(100.0 * passed_rows / total_rows, 1)


def pass_rate(summary: CheckSummary, name: str | None = None) -> float:
    """Percentage of rows that passed, rounded to one decimal (0-100).

    With *name*, the rate covers that single check.  A check that evaluated
    no rows scores 100.0 if it passed and 0.0 otherwise.

    Without *name*, the row universe is the largest ``total_rows`` of any
    result and the failing rows are the union across all checks.  A check
    that failed without evaluating any rows (missing or unequal columns)
    counts every row as failing, so the rate is 0.0.  When no rows were
    evaluated at all the rate is 100.0 if every check passed and 0.0
    otherwise.

    Raises
    ------
    CheckNotFoundError
        If *name* is given and is not in the summary.
    """
    if name is not None:
        result = _result(summary, name)
        if result.total_rows == 0:
            return 100.0 if result.passed else 0.0
        return _rate(result.total_rows - len(result.failing_rows), result.total_rows)

    results = summary.check_results.values()
    universe = max((result.total_rows for result in results), default=0)
    if universe == 0:
        return 100.0 if all(result.passed for result in results) else 0.0
    # A check whose rows were never evaluated fails every row.
    if any(not result.passed and result.total_rows == 0 for result in results):
        return 0.0
    return _rate(universe - len(failing_rows(summary)), universe)


def failing_rows(target: CheckResult | CheckSummary, name: str | None = None) -> list[int]:
    """Failing row positions.

    * ``failing_rows(result)`` -- the rows that failed that result.
    * ``failing_rows(summary, name)`` -- the rows that failed check *name*.
    * ``failing_rows(summary)`` -- sorted, deduplicated union over all checks.

    Raises
    ------
    CheckNotFoundError
        If *name* is given and is not in the summary.
    """
    if isinstance(target, CheckResult):
        if name is not None:
            raise TypeError("failing_rows(result) does not accept a check name")
        return list(target.failing_rows)
    if name is not None:
        return list(_result(target, name).failing_rows)
    rows: set[int] = set()
    for result in target.check_results.values():
        rows.update(result.failing_rows)
    return sorted(rows)


def check_names(checkset: CheckSet) -> list[str]:
    """Names of the checks in *checkset*, in declaration order."""
    return [check.name for check in checkset.checks]


def check_columns(checkset: CheckSet, name: str) -> list[str]:
    """Columns declared by check *name*, in first-occurrence order.

    Raises
    ------
    CheckNotFoundError
        If *name* is not in the check set.
    """
    for check in checkset.checks:
        if check.name == name:
            return list(check.columns)
    raise CheckNotFoundError(name, checkset.name)
