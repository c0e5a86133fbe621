"""Print area and image anchor adjustments after row insertion."""

import logging
import re
from typing import Optional, Pattern

from openpyxl.drawing.spreadsheet_drawing import OneCellAnchor, TwoCellAnchor
from openpyxl.utils import get_column_letter
from openpyxl.utils.cell import coordinate_from_string

from ..sheets.worksheet import WorksheetAdapter, is_empty
from .models import PrintArea

logger = logging.getLogger(__name__)

PRINT_AREA_PATTERN: Pattern = re.compile(r"\$?([A-Z]+)\$?(\d+):\$?([A-Z]+)\$?(\d+)")


def parse_print_area(print_area: Optional[str]) -> Optional[PrintArea]:
    """
    Parse a print-area string such as ``'Sheet 1'!$A$1:$D$20``.

    Args:
        print_area: Print-area text, optionally prefixed by a sheet name

    Returns:
        The parsed bounds, or None when absent or unrecognised
    """
    if not print_area:
        return None

    area = print_area.rsplit("!", 1)[-1]
    match = PRINT_AREA_PATTERN.search(area)
    if not match:
        return None

    return PrintArea(
        start_col=match.group(1),
        start_row=int(match.group(2)),
        end_col=match.group(3),
        end_row=int(match.group(4)),
    )


def content_bounds(sheet: WorksheetAdapter) -> Optional[PrintArea]:
    """Bounding box of all non-empty cells, or None for an empty sheet."""
    min_row = min_col = None
    max_row = max_col = 0

    for row in sheet.iter_rows():
        for col, value in sheet.iter_cells(row):
            if is_empty(value):
                continue
            min_row = row if min_row is None else min(min_row, row)
            min_col = col if min_col is None else min(min_col, col)
            max_row = max(max_row, row)
            max_col = max(max_col, col)

    if min_row is None:
        return None
    return PrintArea(
        start_col=get_column_letter(min_col),
        start_row=min_row,
        end_col=get_column_letter(max_col),
        end_row=max_row,
    )


def recalculate_print_area(sheet: WorksheetAdapter) -> Optional[PrintArea]:
    """Set the print area to the content bounds, clearing it for an empty sheet."""
    bounds = content_bounds(sheet)
    sheet.print_area = str(bounds) if bounds else None
    logger.debug(f"Print area of '{sheet.title}' set to {bounds}")
    return bounds


def shift_image_anchors(sheet: WorksheetAdapter, insert_row: int, count: int) -> int:
    """
    Move images anchored at or below ``insert_row`` down by ``count`` rows.

    Args:
        sheet: Worksheet holding the images
        insert_row: 1-based row where rows were inserted
        count: Number of rows inserted

    Returns:
        Number of images moved
    """
    moved = 0
    # Drawing anchors count rows from 0
    first_row = insert_row - 1

    for image in sheet.images:
        anchor = getattr(image, "anchor", None)

        if isinstance(anchor, str):
            column, row = coordinate_from_string(anchor)
            if row >= insert_row:
                image.anchor = f"{column}{row + count}"
                moved += 1
        elif isinstance(anchor, TwoCellAnchor):
            if anchor._from.row >= first_row:
                anchor._from.row += count
                moved += 1
            if anchor.to.row >= first_row:
                anchor.to.row += count
        elif isinstance(anchor, OneCellAnchor):
            if anchor._from.row >= first_row:
                anchor._from.row += count
                moved += 1

    if moved:
        logger.debug(f"Moved {moved} image(s) down {count} row(s) from row {insert_row}")
    return moved
