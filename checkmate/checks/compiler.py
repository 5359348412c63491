"""Check declaration compiler.

Turns a block of check declarations into a :class:`CheckSet`.  A block is
Python source made of statements of the form::

    check("Amount is positive", is_positive(col("amount")))
    check("Ends after start", later_than(col("end"), col("start")))

supplied either as a string or as the body of a function decorated with
:func:`checkset`::

    @checkset("Payment Validation")
    def payment_checks():
        check("Amount is positive", is_positive(col("amount")))
        check("Valid currency", is_known_currency(col("currency")))

The block is parsed with :mod:`ast` and never executed.  Columns are found
statically by walking each predicate invocation, so the engine knows which
columns to fetch without calling user code, and malformed declarations are
rejected before any data is touched.

Arguments of the predicate call only serve to locate column references:
at run time the predicate receives the raw column values in the order the
columns were first referenced.

Declarations that already carry their columns can skip parsing entirely
via :func:`build_checkset` and :class:`CheckDeclaration` records.
"""

from __future__ import annotations

import ast
import builtins
import inspect
import logging
import sys
import textwrap
from collections.abc import Callable, Iterable, Mapping
from typing import Any, NamedTuple, cast

from checkmate.checks.exceptions import CompileError
from checkmate.checks.models import Check, CheckSet

logger = logging.getLogger(__name__)

CHECK_KEYWORD = "check"
COLUMN_KEYWORD = "col"


# ---------------------------------------------------------------------------
# Declaration markers
# ---------------------------------------------------------------------------


class ColumnRef(NamedTuple):
    """A reference to a column by identifier."""

    name: str


def col(name: str) -> ColumnRef:
    """Reference column *name* inside a check declaration."""
    return ColumnRef(name)


def check(name: str, invocation: Any) -> None:
    """Declare a check inside a block passed to :func:`checkset`.

    Declarations are read from source and never executed; calling this
    function directly is always an error.
    """
    raise RuntimeError(
        f"check({name!r}, ...) is a declaration: use it inside a block compiled by "
        "checkset() or compile_checkset()"
    )


class CheckDeclaration(NamedTuple):
    """An explicit check declaration for :func:`build_checkset`."""

    name: str
    predicate: Callable[..., Any]
    columns: tuple[str, ...] | list[str]


# ---------------------------------------------------------------------------
# Column extraction
# ---------------------------------------------------------------------------


def _is_marker_call(node: ast.AST, keyword: str) -> bool:
    if not isinstance(node, ast.Call):
        return False
    func = node.func
    if isinstance(func, ast.Name):
        return func.id == keyword
    return isinstance(func, ast.Attribute) and func.attr == keyword


class _ColumnCollector(ast.NodeVisitor):
    """Depth-first, pre-order collector of ``col("...")`` references."""

    def __init__(self, source: str, lineno: int | None) -> None:
        self.columns: list[str] = []
        self._source = source
        self._lineno = lineno

    def visit_Call(self, node: ast.Call) -> None:
        if not _is_marker_call(node, COLUMN_KEYWORD):
            self.generic_visit(node)
            return
        if (
            len(node.args) != 1
            or node.keywords
            or not isinstance(node.args[0], ast.Constant)
            or not isinstance(node.args[0].value, str)
        ):
            raise CompileError(
                self._source,
                "column reference must be col() with a single string literal",
                self._lineno,
            )
        name = node.args[0].value
        if name not in self.columns:
            self.columns.append(name)


def extract_columns(node: ast.AST, source: str = "", lineno: int | None = None) -> list[str]:
    """Return every column referenced in *node*, deduplicated by first occurrence."""
    if lineno is None:
        lineno = getattr(node, "lineno", None)
    collector = _ColumnCollector(source or ast.unparse(node), lineno)
    collector.visit(node)
    return collector.columns


# ---------------------------------------------------------------------------
# Predicate resolution
# ---------------------------------------------------------------------------


def _dotted_path(node: ast.expr) -> list[str] | None:
    """Return ``["pkg", "mod", "fn"]`` for ``pkg.mod.fn``, or None if not a plain name path."""
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    parts.append(node.id)
    parts.reverse()
    return parts


def _resolve_predicate(path: list[str], namespace: Mapping[str, Any]) -> Any:
    root, *attrs = path
    if root in namespace:
        target = namespace[root]
    elif hasattr(builtins, root):
        target = getattr(builtins, root)
    else:
        raise LookupError(f"name {root!r} is not defined")
    for attr in attrs:
        target = getattr(target, attr)
    return target


# ---------------------------------------------------------------------------
# Block compilation
# ---------------------------------------------------------------------------


def _compile_declaration(stmt: ast.stmt, source_text: str, namespace: Mapping[str, Any]) -> Check:
    lineno = getattr(stmt, "lineno", None)
    segment = ast.get_source_segment(source_text, stmt) or ast.unparse(stmt)

    def fail(reason: str) -> CompileError:
        return CompileError(segment, reason, lineno)

    if not (isinstance(stmt, ast.Expr) and _is_marker_call(stmt.value, CHECK_KEYWORD)):
        raise fail(f"expected a {CHECK_KEYWORD}(name, predicate(...)) declaration")

    declaration = cast(ast.Call, stmt.value)
    if len(declaration.args) != 2 or declaration.keywords:
        raise fail(f"{CHECK_KEYWORD}() takes exactly two positional arguments: a name and a predicate call")

    name_node, call = declaration.args
    if not (isinstance(name_node, ast.Constant) and isinstance(name_node.value, str)):
        raise fail("check name must be a string literal")

    if not isinstance(call, ast.Call):
        raise fail("check must be a predicate call such as is_valid(col('x'))")
    if isinstance(call.func, ast.Lambda):
        raise fail("check predicate must be a named function, not a lambda")
    if _is_marker_call(call, COLUMN_KEYWORD):
        raise fail("check predicate must be a named function, not a column reference")
    path = _dotted_path(call.func)
    if path is None:
        raise fail("check predicate must be a named function")
    if call.keywords or any(isinstance(arg, ast.Starred) for arg in call.args):
        raise fail("predicate arguments must be positional column expressions")

    for arg in call.args:
        if not extract_columns(arg, segment, lineno):
            raise fail(f"predicate argument {ast.unparse(arg)!r} does not reference a column")

    columns = extract_columns(call, segment, lineno)
    if not columns:
        raise fail("check must reference at least one column")

    try:
        predicate = _resolve_predicate(path, namespace)
    except (LookupError, AttributeError) as exc:
        raise fail(f"cannot resolve predicate {'.'.join(path)!r}: {exc}") from exc
    if not callable(predicate):
        raise fail(f"predicate {'.'.join(path)!r} is not callable")

    return Check(name=name_node.value, predicate=predicate, columns=tuple(columns))


def _is_ignorable(stmt: ast.stmt) -> bool:
    if isinstance(stmt, ast.Pass):
        return True
    return isinstance(stmt, ast.Expr) and isinstance(stmt.value, ast.Constant) and isinstance(stmt.value.value, str)


def _compile_block(name: str, body: list[ast.stmt], source_text: str, namespace: Mapping[str, Any]) -> CheckSet:
    checks: list[Check] = []
    seen: set[str] = set()
    for stmt in body:
        if _is_ignorable(stmt):
            continue
        compiled = _compile_declaration(stmt, source_text, namespace)
        if compiled.name in seen:
            raise CompileError(
                ast.get_source_segment(source_text, stmt) or ast.unparse(stmt),
                f"duplicate check name {compiled.name!r}",
                getattr(stmt, "lineno", None),
            )
        seen.add(compiled.name)
        checks.append(compiled)

    logger.debug("Compiled check set %r with %d check(s)", name, len(checks))
    return CheckSet(name=name, checks=tuple(checks))


def _parse(source_text: str) -> ast.Module:
    try:
        return ast.parse(source_text)
    except SyntaxError as exc:
        raise CompileError(
            (exc.text or "").strip(),
            f"invalid syntax: {exc.msg}",
            exc.lineno,
        ) from exc


def compile_source(name: str, source: str, namespace: Mapping[str, Any]) -> CheckSet:
    """Compile a block of declarations given as source text.

    Predicate names are resolved in *namespace*, falling back to builtins.
    """
    source_text = textwrap.dedent(source)
    module = _parse(source_text)
    return _compile_block(name, module.body, source_text, namespace)


def compile_function(name: str, func: Callable[..., Any]) -> CheckSet:
    """Compile the body of *func* as a block of declarations.

    Predicate names are resolved in the function's globals and the
    variables it closes over.
    """
    try:
        source_text = textwrap.dedent(inspect.getsource(func))
    except (OSError, TypeError) as exc:
        raise CompileError(getattr(func, "__qualname__", repr(func)), "source is not available") from exc

    module = _parse(source_text)
    definition = next(
        (node for node in module.body if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))),
        None,
    )
    if definition is None:
        raise CompileError(getattr(func, "__qualname__", repr(func)), "expected a function definition")

    namespace: dict[str, Any] = dict(func.__globals__)
    namespace.update(inspect.getclosurevars(func).nonlocals)
    return _compile_block(name, definition.body, source_text, namespace)


# ---------------------------------------------------------------------------
# Structured records
# ---------------------------------------------------------------------------


def _build_check(declaration: Any) -> Check:
    try:
        name, predicate, columns = declaration
    except (TypeError, ValueError) as exc:
        raise CompileError(repr(declaration), "expected a (name, predicate, columns) record") from exc

    if not isinstance(name, str):
        raise CompileError(repr(declaration), "check name must be a string")
    if not callable(predicate):
        raise CompileError(name, "check predicate must be callable")
    if getattr(predicate, "__name__", None) == "<lambda>":
        raise CompileError(name, "check predicate must be a named function, not a lambda")
    if isinstance(columns, str) or not isinstance(columns, Iterable):
        raise CompileError(name, "check columns must be a sequence of column names")
    columns = list(columns)
    if not all(isinstance(c, str) for c in columns):
        raise CompileError(name, "check columns must be a sequence of column names")

    unique = tuple(dict.fromkeys(columns))
    if not unique:
        raise CompileError(name, "check must reference at least one column")
    return Check(name=name, predicate=predicate, columns=unique)


def build_checkset(name: str, declarations: Iterable[CheckDeclaration | tuple[Any, ...]]) -> CheckSet:
    """Build a check set from explicit ``(name, predicate, columns)`` records.

    Applies the same rules as the source compiler: string names, named
    callables, at least one column, and unique check names.
    """
    checks: list[Check] = []
    seen: set[str] = set()
    for declaration in declarations:
        built = _build_check(declaration)
        if built.name in seen:
            raise CompileError(built.name, f"duplicate check name {built.name!r}")
        seen.add(built.name)
        checks.append(built)
    return CheckSet(name=name, checks=tuple(checks))


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def compile_checkset(
    name: str,
    declarations: str | Callable[..., Any] | Iterable[CheckDeclaration | tuple[Any, ...]],
    namespace: Mapping[str, Any] | None = None,
) -> CheckSet:
    """Compile *declarations* into a :class:`CheckSet` named *name*.

    Parameters
    ----------
    name:
        Name of the resulting check set.
    declarations:
        Source text of a declaration block, a function whose body is a
        declaration block, or an iterable of :class:`CheckDeclaration`
        records.
    namespace:
        Where predicate names in source text are resolved.  Defaults to the
        caller's globals and locals.  Ignored for functions and records.

    Raises
    ------
    CompileError
        On the first malformed declaration.
    """
    if not isinstance(name, str):
        raise CompileError(repr(name), "check set name must be a string")

    if isinstance(declarations, str):
        if namespace is None:
            frame = sys._getframe(1)
            namespace = {**frame.f_globals, **frame.f_locals}
        return compile_source(name, declarations, namespace)
    if inspect.isfunction(declarations):
        return compile_function(name, declarations)
    if not isinstance(declarations, Iterable):
        raise CompileError(repr(declarations), "expected source text, a function, or declaration records")
    return build_checkset(name, declarations)


def checkset(name: str) -> Callable[[Callable[..., Any]], CheckSet]:
    """Decorator compiling a function's body into a :class:`CheckSet`.

    The decorated name is bound to the resulting check set, not to the
    function.
    """

    def decorator(func: Callable[..., Any]) -> CheckSet:
        return compile_checkset(name, func)

    return decorator
