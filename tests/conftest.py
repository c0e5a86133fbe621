"""Pytest configuration and shared fixtures."""

from io import BytesIO
from typing import Any

import openpyxl
import pytest
from openpyxl.workbook.workbook import Workbook

from sheetfill.engine import RenderOptions
from sheetfill.sheets import WorksheetAdapter


def build_workbook(rows: dict[int, dict[str, Any]], title: str = "Sheet1") -> Workbook:
    """Create a workbook whose first sheet holds ``{row: {column: value}}``."""
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = title
    for row, cells in rows.items():
        for column, value in cells.items():
            sheet[f"{column}{row}"] = value
    return workbook


def workbook_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def workbook() -> Workbook:
    """Create an empty in-memory workbook."""
    return openpyxl.Workbook()


@pytest.fixture
def sheet(workbook: Workbook) -> WorksheetAdapter:
    """Wrap the active worksheet of the in-memory workbook."""
    return WorksheetAdapter(workbook.active)


@pytest.fixture
def options() -> RenderOptions:
    """Render options with numeric string parsing off."""
    return RenderOptions(auto_parse_numbers=False)


@pytest.fixture
def order_data() -> dict:
    """A small order document used across rendering tests."""
    return {
        "customer": {"name": "John", "zip": "00501"},
        "order": {"id": "ORD-001", "date": "2024-01-15"},
        "tags": ["urgent", "gift"],
        "items": [
            {"name": "Widget", "qty": 2, "price": 10},
            {"name": "Gadget", "qty": 1, "price": 20},
            {"name": "Gizmo", "qty": 3, "price": 30},
        ],
    }
