"""Text reports for run summaries and check sets.

:func:`render_summary` and :func:`render_checkset` return deterministic
plain text.  :func:`print_summary` and :func:`print_checkset` write the same
layout to a :class:`rich.console.Console` with colour.

Summary layout::

    ================================================================================
    Check Summary: payments
    ================================================================================

    ✗ positive amount: 2 rows failed
       Row 2: amount=-2
       Row 4: amount=-4
    ✓ known currency: All rows passed

    Summary:
     1/2 checks passed (50.0%)
    Checks completed in 0.01 seconds

Checks are listed failures first, most failing rows first.  Failed checks
list their failing rows, capped to the first and last ``preview`` rows.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.text import Text

from checkmate.checks.models import CheckResult, CheckSet, CheckSummary

RULE = "=" * 80
PASS_GLYPH = "✓"
FAIL_GLYPH = "✗"
CHECK_BULLET = "▪"
DEFAULT_PREVIEW = 5

# A rendered line is a list of (text, rich style) fragments.
_Line = list[tuple[str, str]]


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def ordered_results(summary: CheckSummary) -> list[tuple[str, CheckResult]]:
    """Results in report order; ties keep declaration order."""
    return sorted(summary.check_results.items(), key=lambda item: item[1])


def _failure_row(row: int, values: dict[str, Any]) -> _Line:
    rendered = ", ".join(f"{column}={value}" for column, value in values.items())
    return [(f"   Row {row}: {rendered}", "")]


def _failure_lines(result: CheckResult, preview: int) -> list[_Line]:
    pairs = list(zip(result.failing_rows, result.failing_values))
    if len(pairs) <= 2 * preview:
        return [_failure_row(row, values) for row, values in pairs]

    hidden = len(pairs) - 2 * preview
    lines = [_failure_row(row, values) for row, values in pairs[:preview]]
    lines.append([(f"   ... {hidden} more failures ...", "dim")])
    lines.extend(_failure_row(row, values) for row, values in pairs[-preview:])
    return lines


def _result_lines(name: str, result: CheckResult, preview: int) -> list[_Line]:
    colour = "green" if result.passed else "red"
    glyph = PASS_GLYPH if result.passed else FAIL_GLYPH
    lines: list[_Line] = [[(f"{glyph} ", f"bold {colour}"), (f"{name}: ", ""), (result.message, colour)]]
    if not result.passed:
        lines.extend(_failure_lines(result, preview))
    return lines


def _check_pass_percentage(n_passed: int, n_total: int) -> float:
    return 100.0 * n_passed / n_total if n_total else 100.0


def _summary_lines(summary: CheckSummary, preview: int) -> list[_Line]:
    lines: list[_Line] = [
        [(RULE, "")],
        [(f"Check Summary: {summary.checkset_name}", "bold blue")],
        [(RULE, "")],
        [],
    ]
    for name, result in ordered_results(summary):
        lines.extend(_result_lines(name, result, preview))

    n_total = len(summary.check_results)
    n_passed = sum(1 for result in summary.check_results.values() if result.passed)
    percentage = _check_pass_percentage(n_passed, n_total)
    lines.extend(
        [
            [],
            [("Summary:", "bold")],
            [(f" {n_passed}/{n_total} checks passed ({percentage:.1f}%)", "")],
            [(f"Checks completed in {summary.time_elapsed:.2f} seconds", "")],
        ]
    )
    return lines


def _checkset_lines(checkset: CheckSet) -> list[_Line]:
    lines: list[_Line] = [
        [(f'CheckSet: "{checkset.name}"', "")],
        [(f"Number of checks: {len(checkset.checks)}", "")],
    ]
    for check in checkset.checks:
        lines.append(
            [
                (f"  {CHECK_BULLET} ", ""),
                (check.name, "blue"),
                (" (columns: ", ""),
                (", ".join(check.columns), "cyan"),
                (")", ""),
            ]
        )
    return lines


def _plain(lines: list[_Line]) -> str:
    return "".join("".join(text for text, _ in line) + "\n" for line in lines)


def _styled(line: _Line) -> Text:
    return Text.assemble(*((text, style) if style else text for text, style in line))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_summary(summary: CheckSummary, preview: int = DEFAULT_PREVIEW) -> str:
    """Render *summary* as plain text."""
    return _plain(_summary_lines(summary, preview))


def render_checkset(checkset: CheckSet) -> str:
    """Render the checks of *checkset* and their declared columns."""
    return _plain(_checkset_lines(checkset))


def render(target: CheckSummary | CheckSet, preview: int = DEFAULT_PREVIEW) -> str:
    """Render a run summary or a check set as plain text."""
    if isinstance(target, CheckSummary):
        return render_summary(target, preview)
    if isinstance(target, CheckSet):
        return render_checkset(target)
    raise TypeError(f"Cannot render object of type {type(target).__name__}")


def print_summary(console: Console, summary: CheckSummary, preview: int = DEFAULT_PREVIEW) -> None:
    """Write *summary* to *console* with colour."""
    for line in _summary_lines(summary, preview):
        console.print(_styled(line), soft_wrap=True)


def print_checkset(console: Console, checkset: CheckSet) -> None:
    """Write the checks of *checkset* to *console* with colour."""
    for line in _checkset_lines(checkset):
        console.print(_styled(line), soft_wrap=True)
