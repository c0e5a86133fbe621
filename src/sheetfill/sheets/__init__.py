"""Spreadsheet container integration (openpyxl)."""

from .client import WorkbookClient
from .models import CellStyle, Formula, MergedRange
from .worksheet import WorksheetAdapter

__all__ = [
    "WorkbookClient",
    "CellStyle",
    "Formula",
    "MergedRange",
    "WorksheetAdapter",
]
