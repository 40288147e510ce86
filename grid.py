#!/usr/bin/env python3
"""Month grid cell mapping.

The grid is always 6 rows x 7 columns, so its height stays constant whatever
month is displayed. Day 1 sits at the cell index equal to its weekday offset
(Monday=1), so the first cell always shows the tail of the previous
month. Cells after the last day show the head of the next one.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

from date_math import (
    CalendarDate,
    days_in_month,
    days_in_pred_month,
    pred_month_of,
    succ_month_of,
    weekday_of,
)

GRID_ROWS = 6
GRID_COLUMNS = 7


class IsInMonth(enum.Enum):
    PREVIOUS = "previous"
    SAME = "same"
    NEXT = "next"


@dataclass(frozen=True)
class GridCell:
    column: int
    row: int
    day: int
    is_in_month: IsInMonth

    def to_date(self, year: int, month: int) -> CalendarDate:
        """Resolve the concrete date this cell shows while (year, month) is displayed."""
        if self.is_in_month is IsInMonth.PREVIOUS:
            year, month = pred_month_of(year, month)
        elif self.is_in_month is IsInMonth.NEXT:
            year, month = succ_month_of(year, month)
        return CalendarDate(year, month, self.day)


@lru_cache(maxsize=1024)
def map_cell(column: int, row: int, year: int, month: int) -> GridCell:
    assert 0 <= column < GRID_COLUMNS, f"column out of range: {column}"
    assert 0 <= row < GRID_ROWS, f"row out of range: {row}"

    offset = weekday_of(year, month, 1)
    cell_index = column + GRID_COLUMNS * row
    day = cell_index + 1 - offset

    if day < 1:
        return GridCell(column, row, days_in_pred_month(year, month) + day, IsInMonth.PREVIOUS)
    month_days = days_in_month(year, month)
    if day > month_days:
        return GridCell(column, row, day - month_days, IsInMonth.NEXT)
    return GridCell(column, row, day, IsInMonth.SAME)


def month_cells(year: int, month: int) -> Iterator[GridCell]:
    """Yield every cell of the grid row by row."""
    for row in range(GRID_ROWS):
        for column in range(GRID_COLUMNS):
            yield map_cell(column, row, year, month)


__all__ = [
    "GRID_ROWS",
    "GRID_COLUMNS",
    "IsInMonth",
    "GridCell",
    "map_cell",
    "month_cells",
]
