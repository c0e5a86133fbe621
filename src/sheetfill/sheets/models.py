"""Data models for worksheet operations."""

from copy import copy
from dataclasses import dataclass
from typing import Any, Optional

from openpyxl.cell.cell import Cell


@dataclass(frozen=True)
class CellStyle:
    """Snapshot of a cell's formatting."""

    font: Any = None
    border: Any = None
    fill: Any = None
    alignment: Any = None
    protection: Any = None
    number_format: str = "General"

    @classmethod
    def from_cell(cls, cell: Cell) -> "CellStyle":
        """Capture the formatting of a cell."""
        if not cell.has_style:
            return cls(number_format=cell.number_format)
        return cls(
            font=copy(cell.font),
            border=copy(cell.border),
            fill=copy(cell.fill),
            alignment=copy(cell.alignment),
            protection=copy(cell.protection),
            number_format=cell.number_format,
        )

    def apply_to(self, cell: Cell, number_format: Optional[str] = None) -> None:
        """Write this formatting onto a cell."""
        if self.font is not None:
            cell.font = copy(self.font)
        if self.border is not None:
            cell.border = copy(self.border)
        if self.fill is not None:
            cell.fill = copy(self.fill)
        if self.alignment is not None:
            cell.alignment = copy(self.alignment)
        if self.protection is not None:
            cell.protection = copy(self.protection)
        cell.number_format = number_format or self.number_format


@dataclass(frozen=True)
class MergedRange:
    """Bounds of a merged range (1-based, inclusive)."""

    min_row: int
    min_col: int
    max_row: int
    max_col: int

    def contains(self, row: int, col: int) -> bool:
        return self.min_row <= row <= self.max_row and self.min_col <= col <= self.max_col


@dataclass(frozen=True)
class Formula:
    """A spreadsheet formula without the leading '='."""

    expression: str

    def __str__(self) -> str:
        return f"={self.expression}"
