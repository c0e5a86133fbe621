"""Template rendering engine."""

from .formula import calculate_formula_value, render_formula
from .interpolate import render_cell, render_interpolated_string, render_rich_text
from .layout import parse_print_area, recalculate_print_area, shift_image_anchors
from .models import (
    HideEntry,
    MergePattern,
    PrintArea,
    RenderOptions,
    RowShift,
    RowTemplate,
    SheetRenderReport,
    TableMetadata,
    TableRenderInfo,
    TableRenderResult,
)
from .orchestrator import SheetRenderer, render_workbook, scan_tables
from .table import TableExpander
from .values import render_join, render_value

__all__ = [
    "calculate_formula_value",
    "render_formula",
    "render_cell",
    "render_interpolated_string",
    "render_rich_text",
    "parse_print_area",
    "recalculate_print_area",
    "shift_image_anchors",
    "HideEntry",
    "MergePattern",
    "PrintArea",
    "RenderOptions",
    "RowShift",
    "RowTemplate",
    "SheetRenderReport",
    "TableMetadata",
    "TableRenderInfo",
    "TableRenderResult",
    "SheetRenderer",
    "render_workbook",
    "scan_tables",
    "TableExpander",
    "render_join",
    "render_value",
]
