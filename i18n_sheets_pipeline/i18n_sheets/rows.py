from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from .errors import EmptySheet, MissingKeyColumn
from .utils import unique_preserve_order

KEY_HEADER = "key"


@dataclass
class Row:
    key: str
    values: Dict[str, str] = field(default_factory=dict)

    def is_blank(self) -> bool:
        return not self.key and all(v == "" for v in self.values.values())


@dataclass
class RowTable:
    category: str
    languages: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    @property
    def headers(self) -> List[str]:
        return [KEY_HEADER] + list(self.languages)

    def to_grid(self) -> Tuple[List[str], List[List[str]]]:
        """Rectangular (headers, rows) ready for a spreadsheet write."""
        grid = [[r.key] + [r.values.get(lang, "") for lang in self.languages] for r in self.rows]
        return self.headers, grid


def _cell(row: Sequence[Any], idx: int) -> str:
    if idx >= len(row) or row[idx] is None:
        return ""
    v = row[idx]
    return v if isinstance(v, str) else str(v)


def parse_grid(category: str, grid: Sequence[Sequence[Any]]) -> RowTable:
    """
    Turn a raw cell grid (first row = headers) into a RowTable.
    Raises EmptySheet when there is no data row and MissingKeyColumn when
    no header equals 'key' (case-insensitive).
    """
    if not grid or len(grid) < 2:
        raise EmptySheet(f"No data found in sheet {category}", category=category)

    headers = [_cell(grid[0], i) for i in range(len(grid[0]))]
    key_idx = next((i for i, h in enumerate(headers) if h.lower() == KEY_HEADER), -1)
    if key_idx == -1:
        raise MissingKeyColumn(f"No 'key' column found in sheet {category}", category=category)

    lang_cols = [(i, h) for i, h in enumerate(headers) if i != key_idx and h]
    table = RowTable(category, languages=unique_preserve_order([h for _, h in lang_cols]))
    for raw in grid[1:]:
        row = Row(_cell(raw, key_idx))
        for i, lang in lang_cols:
            row.values[lang] = _cell(raw, i)
        table.rows.append(row)
    return table
