"""Shared fixtures for checkmate tests."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest


class ColumnTable:
    """Minimal column source with a fixed set of integer columns."""

    def __init__(self, **columns: Sequence[Any]) -> None:
        self._columns = dict(columns)
        self.fetched: list[str] = []

    def column_names(self) -> list[str]:
        return list(self._columns)

    def get_column(self, name: str) -> Sequence[Any]:
        self.fetched.append(name)
        return self._columns[name]


@pytest.fixture
def signed_table() -> ColumnTable:
    """Column ``a`` has negatives at rows 2 and 4."""
    return ColumnTable(a=[1, -2, 3, -4, 5], b=[1, 2, 3, 4, 5])


@pytest.fixture
def comparison_table() -> ColumnTable:
    """``a > b`` fails at rows 2 and 3."""
    return ColumnTable(a=[2, 3, 1, 5, 6], b=[1, 4, 2, 3, 3])


@pytest.fixture
def make_table():
    """Factory for ad hoc column tables."""
    return ColumnTable
