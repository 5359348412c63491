"""Check set execution engine.

Evaluates every :class:`Check` of a :class:`CheckSet` against a data
source and aggregates the outcomes into a :class:`CheckSummary`.

Rows are always evaluated to the end so the full failure set is captured.
A predicate that returns a falsy value or raises fails the row; the error
never escapes the check.  Missing columns and columns of unequal length
fail the check without evaluating any row.

Checks can run sequentially or on a bounded thread pool scoped to one run.
The unit of parallel work is a whole check.  Each task writes only its own
pre-allocated slot, and the result mapping is assembled in declaration
order afterwards, so both modes produce identical mappings.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, cast

from checkmate.checks.models import Check, CheckResult, CheckSet, CheckSummary, Timer
from checkmate.checks.sources import ColumnSource, as_column_source
from checkmate.config import Settings, load_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Single check
# ---------------------------------------------------------------------------


def _evaluate_rows(check: Check, columns: list[Any], total_rows: int) -> tuple[list[int], list[dict[str, Any]]]:
    failing_rows: list[int] = []
    failing_values: list[dict[str, Any]] = []
    errors = 0

    for index in range(total_rows):
        values = tuple(column[index] for column in columns)
        try:
            ok = check.evaluate(values)
        except Exception as exc:
            errors += 1
            if errors == 1:
                logger.debug("Check %r: predicate raised on row %d: %r", check.name, index + 1, exc)
            ok = False
        if not ok:
            failing_rows.append(index + 1)
            failing_values.append(dict(zip(check.columns, values)))

    if errors:
        logger.debug("Check %r: predicate raised on %d of %d rows", check.name, errors, total_rows)
    return failing_rows, failing_values


def run_check(source: ColumnSource, check: Check) -> CheckResult:
    """Evaluate *check* against every row of *source*."""
    available = set(source.column_names())
    missing = [name for name in check.columns if name not in available]
    if missing:
        logger.warning(
            "Check %r: required columns not found: %s",
            check.name,
            ", ".join(missing),
            extra={"check": check.name},
        )
        return CheckResult.precondition_failed(f"Required columns not found: {', '.join(missing)}")

    columns = [source.get_column(name) for name in check.columns]
    lengths = [len(column) for column in columns]
    if len(set(lengths)) > 1:
        detail = ", ".join(f"{name}={length}" for name, length in zip(check.columns, lengths))
        logger.warning("Check %r: column lengths differ: %s", check.name, detail, extra={"check": check.name})
        return CheckResult.precondition_failed(f"Column lengths differ: {detail}")

    total_rows = lengths[0] if lengths else 0
    logger.debug("Running check %r over %d rows", check.name, total_rows)
    failing_rows, failing_values = _evaluate_rows(check, columns, total_rows)
    return CheckResult.from_failures(failing_rows, failing_values, total_rows)


# ---------------------------------------------------------------------------
# Whole check set
# ---------------------------------------------------------------------------


def _pool_size(n_checks: int, max_workers: int | None) -> int:
    limit = max_workers if max_workers is not None else (os.cpu_count() or 1)
    return max(1, min(n_checks, limit))


def run_checks(
    data: Any,
    checkset: CheckSet,
    concurrent: bool = False,
    max_workers: int | None = None,
) -> dict[str, CheckResult]:
    """Run every check in *checkset* and map check names to results.

    The mapping is always in declaration order, whichever mode is used.
    Errors raised by the data source itself propagate.
    """
    source = as_column_source(data)
    checks = checkset.checks

    if concurrent and len(checks) > 1:
        slots: list[CheckResult | None] = [None] * len(checks)

        def _run_into_slot(index: int) -> None:
            slots[index] = run_check(source, checks[index])

        workers = _pool_size(len(checks), max_workers)
        logger.debug("Running %d checks on %d worker thread(s)", len(checks), workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="checkmate") as pool:
            futures = [pool.submit(_run_into_slot, index) for index in range(len(checks))]
            for future in futures:
                future.result()

        return {check.name: cast(CheckResult, result) for check, result in zip(checks, slots)}

    return {check.name: run_check(source, check) for check in checks}


def run_checkset(
    data: Any,
    checkset: CheckSet,
    *,
    concurrent: bool = False,
    max_workers: int | None = None,
) -> CheckSummary:
    """Execute *checkset* against *data* and return a timed summary.

    Parameters
    ----------
    data:
        A :class:`ColumnSource`, a mapping of column name to values, or a
        dataframe-like object.
    checkset:
        The compiled checks to run.
    concurrent:
        Distribute checks across a thread pool instead of running them in
        declaration order.
    max_workers:
        Upper bound on the pool size; defaults to the CPU count.
    """
    timer = Timer()
    timer.start()

    results = run_checks(data, checkset, concurrent=concurrent, max_workers=max_workers)

    summary = CheckSummary(
        checkset_name=checkset.name,
        check_results=results,
        time_elapsed=timer.elapsed_seconds(),
    )
    n_passed = sum(1 for r in results.values() if r.passed)
    logger.info(
        "Check set %r: %d/%d checks passed in %.3fs",
        checkset.name,
        n_passed,
        len(results),
        summary.time_elapsed,
        extra={"checkset": checkset.name},
    )
    return summary


class CheckEngine:
    """Runs check sets with defaults taken from :class:`Settings`.

    Parameters
    ----------
    settings:
        Optional pre-loaded settings.  When ``None``, settings are loaded
        from the environment.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or load_settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    def run(self, data: Any, checkset: CheckSet, *, concurrent: bool | None = None) -> CheckSummary:
        """Run *checkset* against *data*; *concurrent* overrides the configured mode."""
        if concurrent is None:
            concurrent = self._settings.concurrent
        return run_checkset(
            data,
            checkset,
            concurrent=concurrent,
            max_workers=self._settings.max_workers,
        )

    def report(self, summary: CheckSummary) -> str:
        """Render *summary* using the configured failure preview."""
        from checkmate.checks.reporting import render_summary

        return render_summary(summary, preview=self._settings.failure_preview)
