"""Worksheet adapter exposing the operations the renderer needs."""

import logging
from typing import Any, Iterator, Optional

from openpyxl.cell.cell import MergedCell
from openpyxl.utils import column_index_from_string, get_column_letter, range_boundaries
from openpyxl.worksheet.worksheet import Worksheet

from .models import CellStyle, Formula, MergedRange

logger = logging.getLogger(__name__)


def is_empty(value: Any) -> bool:
    """A cell value counts as empty when it is None or an empty string."""
    return value is None or value == ""


class WorksheetAdapter:
    """
    Thin wrapper around an openpyxl worksheet.

    openpyxl's ``insert_rows`` only moves cells, so :meth:`insert_row` also
    moves merged ranges and row dimensions (height, hidden flag) to keep
    them attached to their rows.
    """

    def __init__(self, worksheet: Worksheet):
        self.worksheet = worksheet

    @property
    def title(self) -> str:
        return self.worksheet.title

    @property
    def max_row(self) -> int:
        return self.worksheet.max_row

    @property
    def max_column(self) -> int:
        return self.worksheet.max_column

    # Rows and cells

    def iter_rows(self, include_empty: bool = False) -> Iterator[int]:
        """Yield row numbers top to bottom."""
        for row in range(1, self.max_row + 1):
            if include_empty or self.row_has_values(row):
                yield row

    def row_has_values(self, row: int) -> bool:
        return any(not is_empty(value) for _, value in self.iter_cells(row))

    def iter_cells(self, row: int, include_empty: bool = False) -> Iterator[tuple[int, Any]]:
        """
        Yield ``(column, value)`` pairs left to right for one row.

        Reads the worksheet's cell store directly so that scanning never
        creates cells; absent cells read as None.
        """
        cells = self.worksheet._cells
        for col in range(1, self.max_column + 1):
            cell = cells.get((row, col))
            value = cell.value if cell is not None else None
            if include_empty or not is_empty(value):
                yield col, value

    def cell_count(self, row: int) -> int:
        """Column of the last non-empty cell in a row, 0 when empty."""
        last = 0
        for col, _ in self.iter_cells(row):
            last = col
        return last

    def get_value(self, row: int, col: int) -> Any:
        return self.worksheet.cell(row=row, column=col).value

    def set_value(self, row: int, col: int, value: Any) -> None:
        """Write a value; formulas become '='-prefixed text."""
        cell = self.worksheet.cell(row=row, column=col)
        if isinstance(cell, MergedCell):
            return
        if isinstance(value, Formula):
            value = str(value)
        cell.value = value

    def is_merged_cell(self, row: int, col: int) -> bool:
        """True for a non-master cell of a merged range."""
        return isinstance(self.worksheet.cell(row=row, column=col), MergedCell)

    def get_style(self, row: int, col: int) -> CellStyle:
        return CellStyle.from_cell(self.worksheet.cell(row=row, column=col))

    def set_style(self, row: int, col: int, style: CellStyle, number_format: Optional[str] = None):
        style.apply_to(self.worksheet.cell(row=row, column=col), number_format)

    def get_data_type(self, row: int, col: int) -> str:
        return self.worksheet.cell(row=row, column=col).data_type

    def insert_row(self, row: int) -> None:
        """Insert a blank row at ``row``, shifting everything below down by one."""
        self.worksheet.insert_rows(row, 1)
        self._shift_merged_ranges(row)
        self._shift_row_dimensions(row)

    def _shift_merged_ranges(self, row: int) -> None:
        for merged in list(self.worksheet.merged_cells.ranges):
            if merged.max_row < row:
                continue
            min_row = merged.min_row + 1 if merged.min_row >= row else merged.min_row
            bounds = dict(
                start_row=min_row,
                start_column=merged.min_col,
                end_row=merged.max_row + 1,
                end_column=merged.max_col,
            )
            self.worksheet.merged_cells.remove(merged)
            self.worksheet.merge_cells(**bounds)

    def _shift_row_dimensions(self, row: int) -> None:
        dimensions = self.worksheet.row_dimensions
        for index in sorted((r for r in dimensions if r >= row), reverse=True):
            dimension = dimensions.pop(index)
            dimension.index = index + 1
            dimensions[index + 1] = dimension

    # Row visibility

    def is_hidden(self, row: int) -> bool:
        dimension = self.worksheet.row_dimensions.get(row)
        return bool(dimension and dimension.hidden)

    def set_hidden(self, row: int, hidden: bool) -> None:
        self.worksheet.row_dimensions[row].hidden = hidden

    def get_height(self, row: int) -> Optional[float]:
        dimension = self.worksheet.row_dimensions.get(row)
        return dimension.height if dimension else None

    def set_height(self, row: int, height: Optional[float]) -> None:
        self.worksheet.row_dimensions[row].height = height

    def hidden_rows(self) -> set[int]:
        """Rows currently flagged hidden."""
        return {
            row
            for row, dimension in self.worksheet.row_dimensions.items()
            if dimension.hidden
        }

    def clear_row(self, row: int) -> None:
        """Clear every value in a row."""
        for col, _ in list(self.iter_cells(row)):
            self.set_value(row, col, None)

    # Merged ranges

    def merged_ranges(self) -> list[MergedRange]:
        """
        Merged ranges of the sheet.

        Ranges whose text cannot be parsed are skipped.
        """
        ranges = []
        for merged in self.worksheet.merged_cells.ranges:
            try:
                min_col, min_row, max_col, max_row = range_boundaries(str(merged))
            except (TypeError, ValueError):
                logger.debug(f"Skipping malformed merge range: {merged!s}")
                continue
            ranges.append(MergedRange(min_row, min_col, max_row, max_col))
        return ranges

    def find_merge(self, row: int, col: int) -> Optional[MergedRange]:
        """The merged range containing a cell, if any."""
        for merged in self.merged_ranges():
            if merged.contains(row, col):
                return merged
        return None

    def merge(self, range_string: str) -> None:
        self.worksheet.merge_cells(range_string)

    def unmerge(self, range_string: str) -> None:
        self.worksheet.unmerge_cells(range_string)

    # Page layout

    @property
    def print_area(self) -> Optional[str]:
        return self.worksheet.print_area or None

    @print_area.setter
    def print_area(self, value: Optional[str]) -> None:
        self.worksheet.print_area = value

    @property
    def images(self) -> list:
        return list(getattr(self.worksheet, "_images", []))

    # Columns

    def column_widths(self) -> dict[int, float]:
        """Explicitly set column widths keyed by 1-based column index."""
        return {
            column_index_from_string(letter): dimension.width
            for letter, dimension in self.worksheet.column_dimensions.items()
            if dimension.width
        }

    def set_column_width(self, col: int, width: float) -> None:
        self.worksheet.column_dimensions[get_column_letter(col)].width = width
