"""Per-worksheet rendering driver."""

import logging
from typing import Any, Optional

from openpyxl.utils import get_column_letter
from openpyxl.workbook.workbook import Workbook

from ..placeholders.models import FormulaPlaceholder, TablePlaceholder
from ..placeholders.parser import detect_placeholder
from ..sheets.worksheet import WorksheetAdapter
from .formula import error_marker, render_formula
from .interpolate import render_cell
from .layout import parse_print_area, recalculate_print_area
from .models import (
    HideEntry,
    RenderOptions,
    RowShift,
    SheetRenderReport,
    TableMetadata,
    TableRenderInfo,
)
from .table import TableExpander

logger = logging.getLogger(__name__)


def scan_tables(sheet: WorksheetAdapter) -> list[TableMetadata]:
    """
    Find table anchors, bottom-most first.

    Anchors are de-duplicated by (row, path), so the same path anchored on
    two different rows yields two tables.
    """
    tables = []
    seen: set[tuple[int, str]] = set()

    for row in sheet.iter_rows():
        for _, value in sheet.iter_cells(row):
            placeholder = detect_placeholder(value)
            if not isinstance(placeholder, TablePlaceholder):
                continue

            key = (row, placeholder.path)
            if key in seen:
                continue
            seen.add(key)
            tables.append(TableMetadata(row_number=row, path=placeholder.path))

    return sorted(tables, key=lambda table: table.row_number, reverse=True)


def formula_table_info(
    placeholder: FormulaPlaceholder,
    tables_by_path: dict[str, TableRenderInfo],
    last_table: Optional[TableRenderInfo],
) -> Optional[TableRenderInfo]:
    """
    Pick the table a formula aggregates over.

    An ``array.field`` target always uses that array's own table (None if
    it was never expanded). Column letters and bare field names use the
    most recently expanded table.
    """
    if placeholder.column:
        return last_table
    if placeholder.array_path:
        return tables_by_path.get(placeholder.array_path)
    if placeholder.field_name:
        return last_table
    return None


def render_formula_placeholder(
    placeholder: FormulaPlaceholder,
    table_info: Optional[TableRenderInfo],
    data: Any,
) -> Any:
    """Render a formula cell, letting a column-shaped target name a table field."""
    column, field_name = placeholder.column, placeholder.field_name
    if column and table_info and placeholder.target in table_info.field_column_map:
        column, field_name = None, placeholder.target

    return render_formula(
        placeholder.formula_type,
        column,
        field_name,
        placeholder.array_path,
        table_info,
        data,
    )


class SheetRenderer:
    """
    Render one worksheet against a data object.

    Phases run in a fixed order because each needs the final row numbers of
    the previous one: scan anchors, expand tables bottom to top, fix row
    visibility, then substitute every remaining cell top to bottom.
    """

    def __init__(self, data: Any, options: Optional[RenderOptions] = None):
        self.data = data
        self.options = options or RenderOptions()
        self.expander = TableExpander(self.options)

    def render(self, sheet: WorksheetAdapter) -> SheetRenderReport:
        """
        Render a worksheet in place.

        Args:
            sheet: Worksheet to render

        Returns:
            Summary of the tables, rows and cells processed
        """
        report = SheetRenderReport(sheet_name=sheet.title)

        column_widths = sheet.column_widths()
        originally_hidden = sheet.hidden_rows()
        print_area = parse_print_area(sheet.print_area)
        if print_area:
            logger.debug(f"Template print area of '{sheet.title}': {print_area}")

        tables = scan_tables(sheet)
        tables_by_path: dict[str, TableRenderInfo] = {}
        last_table: Optional[TableRenderInfo] = None
        hide_entries: list[HideEntry] = []
        expansion_errors: list[tuple[int, int, int, str]] = []  # (anchor, row, col, message)

        for table in tables:
            result = self.expander.expand(sheet, table.row_number, table.path, [], self.data)

            if result.table_info:
                tables_by_path[table.path] = result.table_info
                last_table = result.table_info
                report.tables_expanded += 1
                report.rows_inserted += result.rows_inserted
            expansion_errors.extend(
                (table.row_number, row, col, message) for row, col, message in result.cell_errors
            )

            hide_entries.append(
                HideEntry(
                    rows_to_hide=result.rows_to_hide,
                    inserted_at=table.row_number,
                    rows_inserted=result.rows_inserted,
                )
            )

        shift = RowShift(
            tuple(
                (entry.inserted_at, entry.rows_inserted)
                for entry in hide_entries
                if entry.rows_inserted > 0
            )
        )
        report.rows_hidden = self._apply_visibility(sheet, hide_entries, shift, originally_hidden, tables)

        # Tables expanded first were pushed down by the ones above them
        tables_by_path = {
            path: info.shifted(shift.offset(info.start_row, inclusive=False))
            for path, info in tables_by_path.items()
        }
        if last_table is not None:
            last_table = last_table.shifted(shift.offset(last_table.start_row, inclusive=False))

        for anchor, row, col, message in expansion_errors:
            final_row = row + shift.offset(anchor, inclusive=False)
            report.cell_errors.append(f"{get_column_letter(col)}{final_row}: {message}")

        self._render_cells(sheet, tables_by_path, last_table, report)

        recalculate_print_area(sheet)
        for col, width in column_widths.items():
            sheet.set_column_width(col, width)

        logger.info(
            f"Rendered sheet '{sheet.title}': {report.tables_expanded} table(s), "
            f"{report.rows_inserted} row(s) inserted, {report.cells_rendered} cell(s)"
        )
        return report

    def _apply_visibility(
        self,
        sheet: WorksheetAdapter,
        hide_entries: list[HideEntry],
        shift: RowShift,
        originally_hidden: set[int],
        tables: list[TableMetadata],
    ) -> list[int]:
        """Hide anchor/template rows and carry user-hidden rows to their new positions."""
        anchor_template_rows: set[int] = set()
        for entry in hide_entries:
            offset = shift.offset(entry.inserted_at, inclusive=False)
            for row in entry.rows_to_hide:
                final_row = row + offset
                sheet.clear_row(final_row)
                sheet.set_hidden(final_row, True)
                sheet.set_height(final_row, 0)
                anchor_template_rows.add(final_row)

        for row in sheet.hidden_rows():
            if row not in anchor_template_rows:
                sheet.set_hidden(row, False)

        table_rows = {t.row_number for t in tables} | {t.row_number + 1 for t in tables}
        for row in originally_hidden:
            if row not in table_rows:
                sheet.set_hidden(shift.final_row(row), True)

        logger.debug(f"Hidden anchor/template rows on '{sheet.title}': {sorted(anchor_template_rows)}")
        return sorted(anchor_template_rows)

    def _render_cells(
        self,
        sheet: WorksheetAdapter,
        tables_by_path: dict[str, TableRenderInfo],
        last_table: Optional[TableRenderInfo],
        report: SheetRenderReport,
    ) -> None:
        """Substitute every remaining placeholder, top to bottom, left to right."""
        scopes = [self.data]

        for row in sheet.iter_rows():
            for col, value in list(sheet.iter_cells(row)):
                if sheet.is_merged_cell(row, col):
                    continue
                try:
                    rendered = self._render_value(value, scopes, tables_by_path, last_table)
                except Exception as e:
                    address = f"{get_column_letter(col)}{row}"
                    logger.warning(f"Failed to render {sheet.title}!{address}: {e}")
                    report.cell_errors.append(f"{address}: {e}")
                    rendered = error_marker(str(e))

                if rendered is not value:
                    sheet.set_value(row, col, rendered)
                report.cells_rendered += 1

    def _render_value(
        self,
        value: Any,
        scopes: list,
        tables_by_path: dict[str, TableRenderInfo],
        last_table: Optional[TableRenderInfo],
    ) -> Any:
        match detect_placeholder(value):
            case TablePlaceholder():
                return value
            case FormulaPlaceholder() as placeholder:
                table_info = formula_table_info(placeholder, tables_by_path, last_table)
                return render_formula_placeholder(placeholder, table_info, self.data)
            case _:
                return render_cell(value, scopes, self.options)


def render_workbook(
    workbook: Workbook,
    data: Any,
    options: Optional[RenderOptions] = None,
) -> list[SheetRenderReport]:
    """
    Render every worksheet of a workbook in place.

    Args:
        workbook: Loaded template workbook
        data: Root data object
        options: Render options; defaults come from settings

    Returns:
        One report per worksheet
    """
    options = options or RenderOptions.from_settings()
    renderer = SheetRenderer(data, options)
    reports = [renderer.render(WorksheetAdapter(sheet)) for sheet in workbook.worksheets]
    logger.info(f"Rendered {len(reports)} sheet(s)")
    return reports
