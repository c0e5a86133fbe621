"""Aggregate formula resolution."""

import logging
import math
from numbers import Number
from typing import Any, Iterable, Optional, Union

from ..config import settings
from ..placeholders.models import FormulaType
from ..placeholders.resolver import get_path, resolve
from ..placeholders.syntax import FORMULA_TYPES
from .models import Formula, TableRenderInfo
from .values import stringify, to_number

logger = logging.getLogger(__name__)

FormulaResult = Union[Formula, int, float, str]


def field_not_found(field_name: str) -> str:
    return f"Field '{field_name}' not found in table"


NO_COLUMN_SPECIFIED = "No column specified for formula"
NO_TABLE_OR_PATH = "No table or array path found for formula"


def unknown_formula_type(formula_type: str) -> str:
    return f"Unknown formula type: {formula_type}"


def invalid_formula_path(target: str) -> str:
    return f"Invalid formula path: {target}"


def error_marker(message: str) -> str:
    """Format an in-cell error marker."""
    return f"{settings.error_prefix} {message}"


def _normalize_type(formula_type: Union[FormulaType, str]) -> str:
    if isinstance(formula_type, FormulaType):
        return formula_type.value
    return str(formula_type).upper()


def _coerce(value: Any) -> Optional[Union[int, float]]:
    """Numeric value of a field, or None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else value
    if isinstance(value, Number):
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        return to_number(value)
    return None


def numeric_values(items: Iterable[Any], field_name: str) -> list[Union[int, float]]:
    """Collect the numeric values of ``field_name`` across ``items``."""
    values = []
    for item in items:
        number = _coerce(get_path(item, field_name, None))
        if number is not None:
            values.append(number)
    return values


def aggregate(formula_type: Union[FormulaType, str], values: list) -> Union[int, float, str]:
    """
    Compute an aggregate over already-coerced numbers.

    Args:
        formula_type: One of SUM, AVERAGE, COUNT, MIN, MAX
        values: Numbers to aggregate

    Returns:
        The aggregate (0 for no values), or an error marker for an
        unknown type
    """
    kind = _normalize_type(formula_type)
    if kind not in FORMULA_TYPES:
        return error_marker(unknown_formula_type(kind))
    if not values:
        return 0

    if kind == "SUM":
        return sum(values)
    if kind == "AVERAGE":
        return sum(values) / len(values)
    if kind == "COUNT":
        return len(values)
    if kind == "MIN":
        return min(values)
    return max(values)


def render_formula(
    formula_type: Union[FormulaType, str],
    column: Optional[str] = None,
    field_name: Optional[str] = None,
    array_path: Optional[str] = None,
    table_info: Optional[TableRenderInfo] = None,
    data: Any = None,
) -> FormulaResult:
    """
    Render a {{#formula}} placeholder.

    With an expanded table, produce a formula over the table's rows in the
    target column (explicit, or looked up by field name). Without one,
    compute the aggregate directly from ``array_path`` in the root data.

    Args:
        formula_type: Aggregate function name
        column: Explicit column letter(s)
        field_name: Field whose template column to aggregate
        array_path: Array path for the data fallback
        table_info: Rows of the expanded table, if any
        data: Root data object

    Returns:
        A Formula, a computed number, or an error marker string
    """
    kind = _normalize_type(formula_type)

    if table_info is not None and table_info.start_row > 0 and table_info.end_row > 0:
        if kind not in FORMULA_TYPES:
            return error_marker(unknown_formula_type(kind))

        target_column = column
        if not target_column and field_name:
            target_column = table_info.field_column_map.get(field_name)
            if not target_column:
                return error_marker(field_not_found(field_name))

        if not target_column:
            return error_marker(NO_COLUMN_SPECIFIED)

        return Formula(
            f"{kind}({target_column}{table_info.start_row}:{target_column}{table_info.end_row})"
        )

    if not array_path or not field_name:
        return error_marker(NO_TABLE_OR_PATH)

    items = get_path(data, array_path, None)
    if not isinstance(items, (list, tuple)) or not items:
        return 0

    result = aggregate(kind, numeric_values(items, field_name))
    logger.debug(f"Computed {kind} over {array_path}.{field_name} without a table: {result}")
    return result


def calculate_formula_value(
    formula_type: Union[FormulaType, str],
    array_path: str,
    field_name: str,
    scopes: list,
) -> str:
    """
    Compute an inline formula as text, resolving the array through scopes.

    Args:
        formula_type: Aggregate function name
        array_path: Array path
        field_name: Numeric field of each element
        scopes: Data contexts, most specific first

    Returns:
        The aggregate as text ("0" for a missing or empty array)
    """
    items = resolve(array_path, scopes)
    if not isinstance(items, (list, tuple)) or not items:
        return "0"
    return stringify(aggregate(formula_type, numeric_values(items, field_name)))
