"""checkmate -- validate in-memory tables against named predicate checks."""

from checkmate.checks import (
    Check,
    CheckDeclaration,
    CheckEngine,
    CheckmateError,
    CheckNotFoundError,
    CheckResult,
    CheckSet,
    CheckSummary,
    ColumnSource,
    CompileError,
    as_column_source,
    build_checkset,
    check,
    check_columns,
    check_names,
    checkset,
    col,
    compile_checkset,
    execution_time,
    failed_checks,
    failing_rows,
    pass_rate,
    passed_checks,
    print_checkset,
    print_summary,
    render,
    render_checkset,
    render_summary,
    run_checkset,
    total_failures,
)
from checkmate.config import Settings, load_settings
from checkmate.log_format import JSONFormatter, configure_logging

__version__ = "0.1.0"

__all__ = [
    "Check",
    "CheckDeclaration",
    "CheckEngine",
    "CheckNotFoundError",
    "CheckResult",
    "CheckSet",
    "CheckSummary",
    "CheckmateError",
    "ColumnSource",
    "CompileError",
    "JSONFormatter",
    "Settings",
    "as_column_source",
    "build_checkset",
    "check",
    "check_columns",
    "check_names",
    "checkset",
    "col",
    "compile_checkset",
    "configure_logging",
    "execution_time",
    "failed_checks",
    "failing_rows",
    "load_settings",
    "pass_rate",
    "passed_checks",
    "print_checkset",
    "print_summary",
    "render",
    "render_checkset",
    "render_summary",
    "run_checkset",
    "total_failures",
]
