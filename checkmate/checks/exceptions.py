"""Exceptions raised by the check framework.

Only declaration mistakes and lookup mistakes are raised.  Data-quality
conditions (missing columns, failing predicates, predicate errors) are
always reported as :class:`~checkmate.checks.models.CheckResult` data.
"""

from __future__ import annotations


class CheckmateError(Exception):
    """Base exception for all checkmate errors."""


class CompileError(CheckmateError, ValueError):
    """A check declaration could not be compiled.

    Compilation is fail-fast: the first malformed declaration aborts the
    whole block.
    """

    def __init__(self, declaration: str, reason: str, lineno: int | None = None) -> None:
        self.declaration = declaration
        self.reason = reason
        self.lineno = lineno
        location = f" (line {lineno})" if lineno is not None else ""
        super().__init__(f"Invalid check declaration{location}: {reason}: {declaration}")


class CheckNotFoundError(CheckmateError, LookupError):
    """A check name was looked up that does not exist."""

    def __init__(self, check_name: str, container: str) -> None:
        self.check_name = check_name
        self.container = container
        super().__init__(f"Check {check_name!r} not found in {container!r}")
