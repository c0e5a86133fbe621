"""Tests for cell rendering and inline interpolation."""

from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.cell.text import InlineFont

from sheetfill.engine import render_cell, render_interpolated_string, render_rich_text


class TestInterpolation:
    """Test placeholders embedded in text."""

    def test_multiple_values(self, order_data):
        text = "Hello {{customer.name}}, order {{order.id}}"
        assert render_interpolated_string(text, [order_data]) == "Hello John, order ORD-001"

    def test_inline_join_and_formula(self, order_data):
        text = 'Tags: {{tags | join(", ")}}; total {{#formula SUM items.price}}'
        assert render_interpolated_string(text, [order_data]) == "Tags: urgent, gift; total 60"

    def test_inline_formula_without_array(self):
        result = render_interpolated_string("{{#formula SUM price}} due", [{}])
        assert result == "#ERROR: Invalid formula path: price due"

    def test_missing_values_render_empty(self):
        assert render_interpolated_string("[{{nope}}]", [{}]) == "[]"

    def test_numbers_are_stringified(self):
        assert render_interpolated_string("x={{n}}", [{"n": 4.0}]) == "x=4"


class TestRenderCell:
    """Test per-cell dispatch."""

    def test_value_placeholder_keeps_type(self, order_data):
        assert render_cell("{{items.0.qty}}", [order_data]) == 2

    def test_join_placeholder(self, order_data):
        assert render_cell('{{tags | join("/")}}', [order_data]) == "urgent/gift"

    def test_table_anchor_unchanged(self):
        assert render_cell("{{#table items}}", [{}]) == "{{#table items}}"

    def test_plain_values_unchanged(self):
        assert render_cell("plain", [{}]) == "plain"
        assert render_cell(7, [{}]) == 7
        assert render_cell(None, [{}]) is None

    def test_element_scope_first(self, order_data):
        item = order_data["items"][1]
        assert render_cell("{{name}} of {{customer.name}}", [item, order_data]) == "Gadget of John"


class TestRichText:
    """Test placeholders inside rich text."""

    def test_placeholder_split_across_runs(self):
        """Test runs holding one placeholder are merged with the first font."""
        bold = InlineFont(b=True)
        value = CellRichText(
            [
                TextBlock(bold, "Dear {{cus"),
                TextBlock(InlineFont(i=True), "tomer.name}}"),
                TextBlock(InlineFont(), ", thanks"),
            ]
        )

        result = render_rich_text(value, [{"customer": {"name": "Ann"}}])

        assert str(result) == "Dear Ann, thanks"
        assert result[0].font.b is True
        assert result[0].text == "Dear Ann"

    def test_plain_runs_untouched(self):
        value = CellRichText(["static ", TextBlock(InlineFont(b=True), "{{x}}")])

        result = render_cell(value, [{"x": 5}])

        assert isinstance(result, CellRichText)
        assert str(result) == "static 5"

    def test_unterminated_placeholder_left_as_written(self):
        value = CellRichText(["a {{b"])
        assert str(render_rich_text(value, [{"b": 1}])) == "a {{b"
