"""Shared fixtures: an in-memory spreadsheet standing in for Google Sheets."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

import pytest

from i18n_sheets.issues import IssueLog
from i18n_sheets.rows import RowTable, parse_grid
from i18n_sheets.sheets_base import SheetBackend


class FakeSheetBackend(SheetBackend):
    """Keeps tabs as raw cell grids, first row = headers."""

    def __init__(self, grids: Dict[str, List[List[str]]] | None = None) -> None:
        self.grids: Dict[str, List[List[str]]] = dict(grids or {})
        self.updates: List[str] = []

    def get_sheet_names(self) -> List[str]:
        return list(self.grids)

    def get_sheet_data(self, name: str) -> RowTable:
        return parse_grid(name, self.grids[name])

    def update_sheet_data(self, name: str, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.grids[name] = [list(headers)] + [list(r) for r in rows]
        self.updates.append(name)


@pytest.fixture
def fake_backend() -> FakeSheetBackend:
    return FakeSheetBackend()


@pytest.fixture
def issues() -> IssueLog:
    return IssueLog(logging.getLogger("i18n-sheets.tests"))


@pytest.fixture
def common_grid() -> List[List[str]]:
    return [
        ["key", "en", "vi"],
        ["greeting.hello", "Hello", "Xin chào"],
        ["greeting.bye", "Bye", "Tạm biệt"],
    ]


@pytest.fixture
def make_backend():
    return FakeSheetBackend
