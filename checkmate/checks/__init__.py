"""checkmate check framework -- compile, run and report on data checks.

Quick start::

    from checkmate.checks import check, checkset, col, run_checkset, render

    def is_positive(x):
        return x > 0

    @checkset("Payment Validation")
    def payment_checks():
        check("Amount is positive", is_positive(col("amount")))

    summary = run_checkset({"amount": [1, -2, 3]}, payment_checks)
    print(render(summary))
"""

from checkmate.checks.compiler import (
    CheckDeclaration,
    ColumnRef,
    build_checkset,
    check,
    checkset,
    col,
    compile_checkset,
    extract_columns,
)
from checkmate.checks.engine import CheckEngine, run_check, run_checks, run_checkset
from checkmate.checks.exceptions import CheckmateError, CheckNotFoundError, CompileError
from checkmate.checks.models import Check, CheckResult, CheckSet, CheckSummary
from checkmate.checks.queries import (
    check_columns,
    check_names,
    execution_time,
    failed_checks,
    failing_rows,
    pass_rate,
    passed_checks,
    total_failures,
)
from checkmate.checks.reporting import (
    print_checkset,
    print_summary,
    render,
    render_checkset,
    render_summary,
)
from checkmate.checks.sources import ColumnSource, FrameColumnSource, MappingColumnSource, as_column_source

__all__ = [
    "Check",
    "CheckDeclaration",
    "CheckEngine",
    "CheckNotFoundError",
    "CheckResult",
    "CheckSet",
    "CheckSummary",
    "CheckmateError",
    "ColumnRef",
    "ColumnSource",
    "CompileError",
    "FrameColumnSource",
    "MappingColumnSource",
    "as_column_source",
    "build_checkset",
    "check",
    "check_columns",
    "check_names",
    "checkset",
    "col",
    "compile_checkset",
    "execution_time",
    "extract_columns",
    "failed_checks",
    "failing_rows",
    "pass_rate",
    "passed_checks",
    "print_checkset",
    "print_summary",
    "render",
    "render_checkset",
    "render_summary",
    "run_check",
    "run_checks",
    "run_checkset",
    "total_failures",
]
