"""Tests for the public rendering entry points."""

from io import BytesIO

import openpyxl
import pytest

from sheetfill import RenderOptions, TemplateLoadError, render_template, render_template_bytes

from conftest import build_workbook, workbook_bytes


@pytest.fixture
def invoice_template():
    """An invoice with a header, an item table and a total row."""
    return build_workbook(
        {
            1: {"A": "Invoice {{order.id}}", "C": "{{order.date}}"},
            2: {"A": "{{#table items}}"},
            3: {"A": "{{name}}", "B": "{{qty}}", "C": "{{price}}"},
            4: {"A": "Total", "C": "{{#formula SUM items.price}}"},
            5: {"A": 'Tags: {{tags | join(", ")}}'},
        },
        title="Invoice",
    )


class TestRenderTemplateBytes:
    """Test rendering a template held in memory."""

    def test_round_trip(self, invoice_template, order_data):
        rendered = render_template_bytes(workbook_bytes(invoice_template), order_data)
        ws = openpyxl.load_workbook(BytesIO(rendered))["Invoice"]

        assert ws["A1"].value == "Invoice ORD-001"
        assert [ws.cell(row=r, column=1).value for r in (2, 3, 4)] == ["Widget", "Gadget", "Gizmo"]
        assert ws["C7"].value == "=SUM(C2:C4)"
        assert ws["A8"].value == "Tags: urgent, gift"
        assert ws.row_dimensions[5].hidden is True
        assert ws.row_dimensions[6].hidden is True

    def test_options_are_applied(self, order_data):
        template = workbook_bytes(build_workbook({1: {"A": "{{customer.zip}}"}}))

        rendered = render_template_bytes(template, order_data, RenderOptions(auto_parse_numbers=True))

        assert openpyxl.load_workbook(BytesIO(rendered)).active["A1"].value == 501

    def test_invalid_template(self):
        with pytest.raises(TemplateLoadError):
            render_template_bytes(b"garbage", {})


class TestRenderTemplate:
    """Test rendering template files."""

    def test_writes_output(self, tmp_path, invoice_template, order_data):
        template_path = tmp_path / "invoice.xlsx"
        output_path = tmp_path / "out" / "invoice.xlsx"
        invoice_template.save(template_path)

        reports = render_template(template_path, order_data, output_path)

        assert output_path.exists()
        assert reports[0].sheet_name == "Invoice"
        assert reports[0].rows_inserted == 3
        assert openpyxl.load_workbook(output_path)["Invoice"]["B2"].value == 2
