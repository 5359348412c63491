"""Tests for checkmate.checks.reporting -- plain text and Rich output.

Rich output is captured via a Console writing to a StringIO buffer with
colour disabled, so assertions run against plain text.
"""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from checkmate.checks.compiler import check, checkset, col
from checkmate.checks.engine import run_checkset
from checkmate.checks.models import Check, CheckResult, CheckSet, CheckSummary
from checkmate.checks.reporting import (
    ordered_results,
    print_checkset,
    print_summary,
    render,
    render_checkset,
    render_summary,
)


def is_positive(x):
    return x > 0


def first_greater_than_second(x, y):
    return x > y


@checkset("report test")
def report_checks():
    check("always pass", is_positive(col("b")))
    check("positive a", is_positive(col("a")))
    check("multi col", first_greater_than_second(col("a"), col("b")))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _capture_console(width: int = 120) -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    console = Console(file=buf, no_color=True, highlight=False, width=width)
    return console, buf


def _failing(n: int, total: int | None = None) -> CheckResult:
    rows = list(range(1, n + 1))
    return CheckResult.from_failures(rows, [{"a": -row} for row in rows], total_rows=total or n)


@pytest.fixture
def summary() -> CheckSummary:
    return run_checkset({"a": [1, -2, 3], "b": [4, 5, 6]}, report_checks)


# ---------------------------------------------------------------------------
# Summary rendering
# ---------------------------------------------------------------------------


class TestRenderSummary:
    def test_header(self, summary):
        output = render_summary(summary)
        lines = output.splitlines()
        assert lines[0] == "=" * 80
        assert lines[1] == "Check Summary: report test"
        assert lines[2] == "=" * 80
        assert lines[3] == ""

    def test_failure_first_order(self, summary):
        lines = render_summary(summary).splitlines()
        status_lines = [line for line in lines if line.startswith(("✓", "✗"))]
        assert status_lines == [
            "✗ multi col: 3 rows failed",
            "✗ positive a: 1 rows failed",
            "✓ always pass: All rows passed",
        ]

    def test_failure_rows_listed(self, summary):
        output = render_summary(summary)
        assert "   Row 2: a=-2\n" in output
        assert "   Row 1: a=1, b=4\n" in output

    def test_passed_checks_list_no_rows(self):
        summary = CheckSummary(
            checkset_name="ok",
            check_results={"fine": CheckResult.from_failures([], [], total_rows=3)},
        )
        assert "Row" not in render_summary(summary)

    def test_footer(self, summary):
        lines = render_summary(summary).splitlines()
        assert lines[-4] == ""
        assert lines[-3] == "Summary:"
        assert lines[-2] == " 1/3 checks passed (33.3%)"
        assert lines[-1].startswith("Checks completed in ")
        assert lines[-1].endswith(" seconds")

    def test_elapsed_formatting(self):
        summary = CheckSummary(checkset_name="t", time_elapsed=1.23456)
        assert "Checks completed in 1.23 seconds" in render_summary(summary)

    def test_empty_summary(self):
        output = render_summary(CheckSummary(checkset_name="nothing"))
        assert " 0/0 checks passed (100.0%)" in output

    def test_deterministic(self, summary):
        assert render_summary(summary) == render_summary(summary)

    def test_exactly_ten_failures_listed_in_full(self):
        summary = CheckSummary(checkset_name="t", check_results={"ten": _failing(10)})
        output = render_summary(summary)
        assert output.count("   Row ") == 10
        assert "more failures" not in output

    def test_truncated_failures(self):
        summary = CheckSummary(checkset_name="t", check_results={"many": _failing(25)})
        lines = render_summary(summary).splitlines()
        row_lines = [line for line in lines if line.startswith("   ")]
        assert row_lines[:5] == [f"   Row {i}: a={-i}" for i in range(1, 6)]
        assert row_lines[5] == "   ... 15 more failures ..."
        assert row_lines[6:] == [f"   Row {i}: a={-i}" for i in range(21, 26)]

    def test_missing_columns_message(self):
        summary = CheckSummary(
            checkset_name="t",
            check_results={"needs z": CheckResult.precondition_failed("Required columns not found: z")},
        )
        assert "✗ needs z: Required columns not found: z" in render_summary(summary)

    def test_str_uses_render(self, summary):
        assert str(summary) == render_summary(summary)

    def test_ties_keep_mapping_order(self):
        summary = CheckSummary(
            checkset_name="t",
            check_results={"b": _failing(1, 3), "a": _failing(1, 3), "c": _failing(2, 3)},
        )
        assert [name for name, _ in ordered_results(summary)] == ["c", "b", "a"]

    def test_ordering_does_not_reorder_results(self, summary):
        render_summary(summary)
        assert list(summary.check_results) == ["always pass", "positive a", "multi col"]


# ---------------------------------------------------------------------------
# Check set rendering
# ---------------------------------------------------------------------------


class TestRenderCheckset:
    def test_layout(self):
        assert render_checkset(report_checks).splitlines() == [
            'CheckSet: "report test"',
            "Number of checks: 3",
            "  ▪ always pass (columns: b)",
            "  ▪ positive a (columns: a)",
            "  ▪ multi col (columns: a, b)",
        ]

    def test_str_uses_render(self):
        assert str(report_checks) == render_checkset(report_checks)


class TestRender:
    def test_dispatch(self, summary):
        assert render(summary) == render_summary(summary)
        assert render(report_checks) == render_checkset(report_checks)

    def test_unsupported(self):
        with pytest.raises(TypeError, match="Cannot render"):
            render("text")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------


class TestRichOutput:
    def test_print_summary_matches_plain_text(self, summary):
        console, buf = _capture_console()
        print_summary(console, summary)
        assert buf.getvalue() == render_summary(summary)

    def test_long_lines_are_not_wrapped(self):
        column = "c" * 60
        summary = CheckSummary(
            checkset_name="wide",
            check_results={
                "x" * 90: CheckResult.from_failures([1], [{column: -(10**24)}], total_rows=1),
            },
        )
        assert any(len(line) > 80 for line in render_summary(summary).splitlines())
        console, buf = _capture_console(width=80)
        print_summary(console, summary)
        assert buf.getvalue() == render_summary(summary)

    def test_long_check_names_are_not_wrapped_in_checkset(self):
        wide = CheckSet(
            name="wide",
            checks=(Check(name="n" * 90, predicate=bool, columns=("c" * 40,)),),
        )
        console, buf = _capture_console(width=80)
        print_checkset(console, wide)
        assert buf.getvalue() == render_checkset(wide)

    def test_print_summary_preview(self):
        summary = CheckSummary(checkset_name="t", check_results={"many": _failing(6)})
        console, buf = _capture_console()
        print_summary(console, summary, preview=2)
        assert "... 2 more failures ..." in buf.getvalue()

    def test_print_checkset(self):
        console, buf = _capture_console()
        print_checkset(console, report_checks)
        output = buf.getvalue()
        assert 'CheckSet: "report test"' in output
        assert "Number of checks: 3" in output
        assert "multi col (columns: a, b)" in output

    def test_user_text_not_treated_as_markup(self):
        summary = CheckSummary(
            checkset_name="[bold]raw[/bold]",
            check_results={"[red]x[/red]": CheckResult.from_failures([], [], total_rows=1)},
        )
        console, buf = _capture_console()
        print_summary(console, summary)
        assert "Check Summary: [bold]raw[/bold]" in buf.getvalue()
        assert "✓ [red]x[/red]: All rows passed" in buf.getvalue()
