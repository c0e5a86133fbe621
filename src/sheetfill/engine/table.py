"""Array-backed table expansion.

A table is written as two rows: an anchor row holding {{#table items}} and,
right below it, a template row whose cells use element fields such as
{{name}} or {{price}}. Expansion inserts one copy of the template row per
array element above the anchor, then schedules the anchor and template rows
for hiding.
"""

import logging
from typing import Any, Optional

from openpyxl.utils import get_column_letter

from ..config import settings
from ..placeholders.resolver import resolve
from ..placeholders.syntax import FIELD_PATTERN
from ..sheets.worksheet import WorksheetAdapter
from .formula import error_marker
from .interpolate import render_cell
from .layout import shift_image_anchors
from .models import (
    CellTemplate,
    MergePattern,
    RenderOptions,
    RowTemplate,
    TableRenderInfo,
    TableRenderResult,
)

logger = logging.getLogger(__name__)


def _merge_span(merge) -> MergePattern:
    return MergePattern(start_col=merge.min_col, end_col=merge.max_col)


def _range_string(row: int, pattern: MergePattern) -> str:
    return (
        f"{get_column_letter(pattern.start_col)}{row}:"
        f"{get_column_letter(pattern.end_col)}{row}"
    )


def map_field_columns(field_column_map: dict[str, str], value: Any, col: int) -> None:
    """Record which column each {{field}} placeholder of a cell occupies."""
    if not isinstance(value, str):
        return

    column = get_column_letter(col)
    for match in FIELD_PATTERN.finditer(value):
        field_path = match.group(1)
        field_column_map[field_path] = column

        last_segment = field_path.split(".")[-1]
        field_column_map.setdefault(last_segment, column)


class TableExpander:
    """Expand table anchors into one row per array element."""

    def __init__(self, options: Optional[RenderOptions] = None):
        self.options = options or RenderOptions()

    def extract_merge_patterns(self, sheet: WorksheetAdapter, row: int) -> list[MergePattern]:
        """Merge spans whose top-left cell sits on ``row``."""
        patterns = []
        processed: set[int] = set()
        max_col = sheet.cell_count(row) or settings.merge_scan_columns

        for col in range(1, max_col + 1):
            if col in processed:
                continue
            merge = sheet.find_merge(row, col)
            if merge is None or merge.min_row != row:
                continue

            pattern = _merge_span(merge)
            patterns.append(pattern)
            processed.update(range(pattern.start_col, pattern.end_col + 1))

        return patterns

    def capture_row_template(self, sheet: WorksheetAdapter, row: int) -> RowTemplate:
        """
        Snapshot a template row.

        Args:
            sheet: Worksheet holding the row
            row: Row number of the template row

        Returns:
            Per-column cell templates, merge spans and the field-to-column map
        """
        cells = {}
        field_column_map: dict[str, str] = {}

        for col, value in sheet.iter_cells(row, include_empty=True):
            merge = sheet.find_merge(row, col)
            style = sheet.get_style(row, col)
            cells[col] = CellTemplate(
                value=value,
                style=style,
                number_format=style.number_format,
                data_type=sheet.get_data_type(row, col),
                merge=_merge_span(merge) if merge else None,
            )
            map_field_columns(field_column_map, value, col)

        return RowTemplate(
            cells=cells,
            merge_patterns=self.extract_merge_patterns(sheet, row),
            field_column_map=field_column_map,
        )

    def apply_row_template(
        self,
        sheet: WorksheetAdapter,
        row: int,
        template: RowTemplate,
        scopes: list,
    ) -> list[tuple[int, int, str]]:
        """
        Render a template row into ``row`` against ``scopes``.

        A cell that fails to render receives an error marker; the rest of
        the row is still written.

        Returns:
            (row, column, message) for every failed cell
        """
        errors = []
        for col, cell_template in sorted(template.cells.items()):
            sheet.set_style(row, col, cell_template.style, cell_template.number_format)

            # Only the top-left cell of a merged span carries a value
            if cell_template.is_merged and col != cell_template.merge.start_col:
                continue

            try:
                rendered = render_cell(cell_template.value, scopes, self.options)
            except Exception as e:
                logger.warning(
                    f"Failed to render {sheet.title}!{get_column_letter(col)}{row} "
                    f"in table row: {e}"
                )
                errors.append((row, col, str(e)))
                rendered = error_marker(str(e))
            sheet.set_value(row, col, rendered)
        return errors

    def apply_merge_patterns(
        self, sheet: WorksheetAdapter, row: int, patterns: list[MergePattern]
    ) -> None:
        """Merge ``row`` with the captured spans; failures leave the row unmerged."""
        for pattern in patterns:
            range_string = _range_string(row, pattern)
            try:
                sheet.unmerge(range_string)
            except ValueError:
                pass  # not merged yet
            try:
                sheet.merge(range_string)
            except ValueError as e:
                logger.debug(f"Could not merge {range_string} on '{sheet.title}': {e}")

    def expand(
        self,
        sheet: WorksheetAdapter,
        anchor_row: int,
        array_path: str,
        scopes: list,
        root_data: Any,
    ) -> TableRenderResult:
        """
        Expand one table anchor.

        Args:
            sheet: Worksheet being rendered
            anchor_row: Row holding the {{#table}} anchor
            array_path: Path of the array to expand
            scopes: Local scopes searched before the root data
            root_data: Root data object

        Returns:
            The table's final rows (None when nothing was inserted) and the
            rows to hide, in coordinates after this expansion, plus any cells
            that failed to render
        """
        all_scopes = [*scopes, root_data]
        items = resolve(array_path, all_scopes)
        template_row = anchor_row + 1

        if not isinstance(items, (list, tuple)) or not items:
            logger.debug(
                f"Table '{array_path}' at row {anchor_row} has no rows to insert; hiding anchor"
            )
            return TableRenderResult(table_info=None, rows_to_hide=[anchor_row, template_row])

        template = self.capture_row_template(sheet, template_row)
        cell_errors = []

        for index, item in enumerate(items):
            insert_at = anchor_row + index
            sheet.insert_row(insert_at)
            cell_errors.extend(
                self.apply_row_template(sheet, insert_at, template, [item, *all_scopes])
            )
            self.apply_merge_patterns(sheet, insert_at, template.merge_patterns)

        count = len(items)
        shift_image_anchors(sheet, anchor_row, count)
        logger.debug(f"Expanded table '{array_path}' into rows {anchor_row}-{anchor_row + count - 1}")

        return TableRenderResult(
            table_info=TableRenderInfo(
                start_row=anchor_row,
                end_row=anchor_row + count - 1,
                path=array_path,
                field_column_map=dict(template.field_column_map),
            ),
            rows_to_hide=[anchor_row + count, template_row + count],
            cell_errors=cell_errors,
        )
