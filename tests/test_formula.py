"""Tests for aggregate formula resolution."""

from sheetfill.engine import TableRenderInfo, calculate_formula_value, render_formula
from sheetfill.engine.formula import aggregate
from sheetfill.placeholders import FormulaType
from sheetfill.sheets import Formula


class TestRenderFormulaWithTable:
    """Test formulas targeting an expanded table."""

    def test_explicit_column(self):
        table = TableRenderInfo(start_row=5, end_row=10, path="items")

        result = render_formula(FormulaType.SUM, column="C", table_info=table)

        assert result == Formula("SUM(C5:C10)")
        assert str(result) == "=SUM(C5:C10)"

    def test_field_name_uses_template_column(self):
        table = TableRenderInfo(
            start_row=3, end_row=7, path="items", field_column_map={"price": "D"}
        )

        result = render_formula("AVERAGE", field_name="price", table_info=table)

        assert result == Formula("AVERAGE(D3:D7)")

    def test_field_not_found(self):
        table = TableRenderInfo(start_row=1, end_row=2, path="items", field_column_map={})

        result = render_formula("SUM", field_name="price", table_info=table)

        assert result == "#ERROR: Field 'price' not found in table"

    def test_no_column(self):
        table = TableRenderInfo(start_row=1, end_row=2, path="items")
        assert render_formula("SUM", table_info=table) == "#ERROR: No column specified for formula"

    def test_unknown_type(self):
        table = TableRenderInfo(start_row=1, end_row=2, path="items")
        result = render_formula("MEDIAN", column="B", table_info=table)
        assert result == "#ERROR: Unknown formula type: MEDIAN"


class TestRenderFormulaFromData:
    """Test formulas computed directly from data."""

    def test_sum_from_data(self):
        data = {"items": [{"price": 10}, {"price": "20"}, {"price": 30}]}

        result = render_formula("SUM", field_name="price", array_path="items", data=data)

        assert result == 60

    def test_non_numeric_values_skipped(self):
        data = {"items": [{"price": 10}, {"price": "n/a"}, {"price": None}, {"price": True}]}
        assert render_formula("COUNT", field_name="price", array_path="items", data=data) == 1

    def test_empty_array_is_zero(self):
        assert render_formula("SUM", field_name="price", array_path="items", data={"items": []}) == 0
        assert render_formula("MAX", field_name="price", array_path="items", data={}) == 0

    def test_missing_path(self):
        result = render_formula("SUM", field_name="price", data={})
        assert result == "#ERROR: No table or array path found for formula"

    def test_unknown_type_without_table(self):
        data = {"items": [{"price": 1}]}
        result = render_formula("MEDIAN", field_name="price", array_path="items", data=data)
        assert result == "#ERROR: Unknown formula type: MEDIAN"


class TestAggregate:
    """Test the aggregate functions."""

    def test_each_type(self):
        values = [10, 20, 30]
        assert aggregate("SUM", values) == 60
        assert aggregate("AVERAGE", values) == 20
        assert aggregate("COUNT", values) == 3
        assert aggregate("MIN", values) == 10
        assert aggregate("MAX", values) == 30

    def test_empty_values(self):
        assert aggregate("AVERAGE", []) == 0


class TestCalculateFormulaValue:
    """Test inline formula calculation."""

    def test_returns_text(self, order_data):
        scopes = [order_data]
        assert calculate_formula_value("SUM", "items", "price", scopes) == "60"
        assert calculate_formula_value("AVERAGE", "items", "price", scopes) == "20"
        assert calculate_formula_value("COUNT", "items", "price", scopes) == "3"

    def test_missing_array(self):
        assert calculate_formula_value("SUM", "items", "price", [{}]) == "0"

    def test_resolves_through_scopes(self):
        scopes = [{"lines": [{"v": 1}, {"v": 2}]}, {"lines": []}]
        assert calculate_formula_value("MAX", "lines", "v", scopes) == "2"
