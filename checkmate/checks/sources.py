"""Column access for data sources.

The engine only needs two capabilities from a data source: enumerate its
column names, and fetch one column as a fixed-length, randomly addressable
sequence.  :class:`ColumnSource` captures that contract; consumer code
depends on it, never on a concrete table type.

:func:`as_column_source` adapts the common in-memory shapes (mappings of
column name to sequence, and dataframe-like objects such as pandas or
polars frames) to the protocol.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ColumnSource(Protocol):
    """Minimal column-oriented view of a table."""

    def column_names(self) -> Iterable[str]:
        """Return the identifiers of all available columns."""
        ...

    def get_column(self, name: str) -> Sequence[Any]:
        """Return the values of column *name*, indexable by row position."""
        ...


class MappingColumnSource:
    """Column source over a mapping of column name to sequence of values."""

    def __init__(self, columns: Mapping[str, Sequence[Any]]) -> None:
        self._columns = columns

    def column_names(self) -> list[str]:
        return list(self._columns.keys())

    def get_column(self, name: str) -> Sequence[Any]:
        column = self._columns[name]
        if isinstance(column, Sequence) and not isinstance(column, (str, bytes)):
            return column
        return list(column)


class FrameColumnSource:
    """Column source over a dataframe-like object.

    Works with any object exposing ``.columns`` and ``frame[name]``
    returning an iterable column, which covers pandas and polars frames.
    Columns are materialized to plain lists so positional access never
    depends on the frame's index.  Non-string labels (such as the integer
    columns of an unnamed frame) are exposed by their string form and
    looked up by their original label.
    """

    def __init__(self, frame: Any) -> None:
        self._frame = frame
        self._labels = {str(label): label for label in frame.columns}

    def column_names(self) -> list[str]:
        return list(self._labels)

    def get_column(self, name: str) -> list[Any]:
        column = self._frame[self._labels.get(name, name)]
        to_list = getattr(column, "to_list", None) or getattr(column, "tolist", None)
        if to_list is not None:
            return list(to_list())
        return list(column)


def as_column_source(data: Any) -> ColumnSource:
    """Adapt *data* to the :class:`ColumnSource` protocol.

    Raises
    ------
    TypeError
        If *data* is neither a column source, a mapping, nor a
        dataframe-like object.
    """
    if isinstance(data, ColumnSource):
        return data
    if isinstance(data, Mapping):
        return MappingColumnSource(data)
    if hasattr(data, "columns") and hasattr(data, "__getitem__"):
        return FrameColumnSource(data)
    raise TypeError(
        f"Unsupported data source type {type(data).__name__}: expected a mapping of "
        "column name to values, a dataframe-like object, or a ColumnSource"
    )
