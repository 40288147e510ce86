import pytest

from date_math import CalendarDate, days_in_month
from grid import GRID_COLUMNS, GRID_ROWS, GridCell, IsInMonth, map_cell, month_cells


@pytest.mark.parametrize(
    "year, month",
    [(2024, 1), (2024, 2), (2024, 3), (2021, 2), (2023, 10), (2024, 12), (2000, 2)],
)
def test_same_cells_cover_the_month_once(year: int, month: int) -> None:
    cells = list(month_cells(year, month))
    assert len(cells) == GRID_ROWS * GRID_COLUMNS

    same = [cell.day for cell in cells if cell.is_in_month is IsInMonth.SAME]
    assert same == list(range(1, days_in_month(year, month) + 1))


def test_march_2024_starts_on_friday() -> None:
    first = map_cell(0, 0, 2024, 3)
    assert first.is_in_month is IsInMonth.PREVIOUS
    assert first.day == days_in_month(2024, 2) + (1 - 5)
    assert first.day == 25
    assert first.to_date(2024, 3) == CalendarDate(2024, 2, 25)

    day_one = map_cell(5, 0, 2024, 3)
    assert day_one.is_in_month is IsInMonth.SAME
    assert day_one.day == 1


def test_monday_start_shows_one_previous_day() -> None:
    cell = map_cell(0, 0, 2024, 1)
    assert cell.is_in_month is IsInMonth.PREVIOUS
    assert cell.to_date(2024, 1) == CalendarDate(2023, 12, 31)
    assert map_cell(1, 0, 2024, 1) == GridCell(1, 0, 1, IsInMonth.SAME)

    last = map_cell(6, 5, 2024, 1)
    assert last.is_in_month is IsInMonth.NEXT
    assert last.day == 10


def test_sunday_start_fills_the_first_row_with_previous_days() -> None:
    row = [map_cell(column, 0, 2023, 10) for column in range(GRID_COLUMNS)]
    assert [cell.day for cell in row] == [24, 25, 26, 27, 28, 29, 30]
    assert all(cell.is_in_month is IsInMonth.PREVIOUS for cell in row)
    assert map_cell(0, 1, 2023, 10) == GridCell(0, 1, 1, IsInMonth.SAME)
    assert map_cell(2, 5, 2023, 10) == GridCell(2, 5, 31, IsInMonth.SAME)


def test_trailing_cells_resolve_into_next_year() -> None:
    cell = map_cell(6, 5, 2024, 12)
    assert cell.is_in_month is IsInMonth.NEXT
    assert cell.to_date(2024, 12) == CalendarDate(2025, 1, 4)


def test_leading_cells_resolve_into_previous_year() -> None:
    cell = map_cell(0, 0, 2025, 1)
    assert cell.is_in_month is IsInMonth.PREVIOUS
    assert cell.to_date(2025, 1) == CalendarDate(2024, 12, 29)


def test_cells_are_consecutive_days() -> None:
    dates = [cell.to_date(2024, 2).to_date() for cell in month_cells(2024, 2)]
    gaps = {(later - earlier).days for earlier, later in zip(dates, dates[1:])}
    assert gaps == {1}


def test_out_of_grid_cell_fails_loudly() -> None:
    with pytest.raises(AssertionError):
        map_cell(7, 0, 2024, 3)
    with pytest.raises(AssertionError):
        map_cell(0, 6, 2024, 3)
