"""Data models for the template rendering engine."""

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from pydantic import BaseModel

from ..config import settings
from ..sheets.models import Formula


class RenderOptions(BaseModel):
    """Options for a single render call."""

    # Convert fully numeric strings to numbers; drops leading zeros ("00501" -> 501)
    auto_parse_numbers: bool = False

    @classmethod
    def from_settings(cls) -> "RenderOptions":
        """Build options from the process settings."""
        return cls(auto_parse_numbers=settings.auto_parse_numbers)


@dataclass(frozen=True)
class TableMetadata:
    """A table anchor found while scanning a sheet."""

    row_number: int
    path: str


@dataclass
class TableRenderInfo:
    """Final rows occupied by an expanded table, used to target formulas."""

    start_row: int
    end_row: int
    path: str
    field_column_map: dict[str, str] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    def shifted(self, offset: int) -> "TableRenderInfo":
        """Copy moved down by ``offset`` rows."""
        if not offset:
            return self
        return replace(self, start_row=self.start_row + offset, end_row=self.end_row + offset)


@dataclass
class TableRenderResult:
    """Outcome of expanding one table anchor."""

    table_info: Optional[TableRenderInfo]
    rows_to_hide: list[int]
    # (row, column, message) for cloned cells that failed, rows as written
    cell_errors: list[tuple[int, int, str]] = field(default_factory=list)

    @property
    def rows_inserted(self) -> int:
        return self.table_info.row_count if self.table_info else 0


@dataclass(frozen=True)
class MergePattern:
    """Horizontal merge span captured from a template row."""

    start_col: int
    end_col: int

    @property
    def span_cols(self) -> int:
        return self.end_col - self.start_col + 1


@dataclass(frozen=True)
class CellTemplate:
    """Snapshot of one template cell."""

    value: Any
    style: Any  # Opaque style handle from the worksheet adapter
    number_format: Optional[str] = None
    data_type: Optional[str] = None
    merge: Optional[MergePattern] = None

    @property
    def is_merged(self) -> bool:
        return self.merge is not None


@dataclass(frozen=True)
class RowTemplate:
    """Captured template row, cloned once per array element."""

    cells: dict[int, CellTemplate]  # column index -> template
    merge_patterns: list[MergePattern]
    field_column_map: dict[str, str]


@dataclass(frozen=True)
class HideEntry:
    """Rows to hide for one processed anchor."""

    rows_to_hide: list[int]  # Positions right after this anchor's own insertion
    inserted_at: int  # Original anchor row
    rows_inserted: int


@dataclass(frozen=True)
class RowShift:
    """
    Maps original row numbers to final ones after table insertions.

    Built from (anchor row, rows inserted) pairs once every table on the
    sheet has been expanded.
    """

    insertions: tuple[tuple[int, int], ...] = ()

    def offset(self, row: int, inclusive: bool = True) -> int:
        """
        Rows inserted at or above ``row``.

        With ``inclusive=False`` only insertions strictly above ``row``
        count, which is what an anchor's own rows need since they already
        account for that anchor's insertion.
        """
        return sum(
            count
            for inserted_at, count in self.insertions
            if inserted_at < row or (inclusive and inserted_at == row)
        )

    def final_row(self, row: int) -> int:
        """Final position of an original row untouched by any expansion."""
        return row + self.offset(row)


@dataclass
class PrintArea:
    """Bounds parsed from a print-area string."""

    start_col: str
    start_row: int
    end_col: str
    end_row: int

    def __str__(self) -> str:
        return f"{self.start_col}{self.start_row}:{self.end_col}{self.end_row}"


@dataclass
class SheetRenderReport:
    """Summary of rendering one worksheet."""

    sheet_name: str
    tables_expanded: int = 0
    rows_inserted: int = 0
    rows_hidden: list[int] = field(default_factory=list)
    cells_rendered: int = 0
    cell_errors: list[str] = field(default_factory=list)  # "A1: message"
