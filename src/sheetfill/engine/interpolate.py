"""Cell rendering: whole-cell placeholders, inline interpolation and rich text."""

import logging
from typing import Any, Optional

from openpyxl.cell.rich_text import CellRichText, TextBlock

from ..placeholders.models import JoinPlaceholder, TablePlaceholder, ValuePlaceholder
from ..placeholders.parser import PlaceholderParser, detect_placeholder
from ..placeholders.resolver import resolve
from ..placeholders.syntax import INLINE_FORMULA_PATTERN, INLINE_JOIN_PATTERN, split_field_path
from .formula import calculate_formula_value, error_marker, invalid_formula_path
from .models import RenderOptions
from .values import render_join, render_value, stringify

logger = logging.getLogger(__name__)

_parser = PlaceholderParser()


def _render_expression(expression: str, scopes: list) -> str:
    """Render the inside of one inline {{...}} span as text."""
    formula_match = INLINE_FORMULA_PATTERN.match(expression)
    if formula_match:
        target = formula_match.group(2)
        array_path, field_name = split_field_path(target)
        if array_path:
            return calculate_formula_value(formula_match.group(1), array_path, field_name, scopes)
        return error_marker(invalid_formula_path(target))

    join_match = INLINE_JOIN_PATTERN.match(expression)
    if join_match:
        return render_join(join_match.group(1).strip(), join_match.group(2), scopes)

    return stringify(resolve(expression, scopes))


def render_interpolated_string(template: str, scopes: list) -> str:
    """
    Substitute every {{...}} span in a piece of text.

    Each span may be a value path, a join or an inline formula over an
    ``array.field`` path. Results are always text.

    Args:
        template: Text containing placeholders
        scopes: Data contexts, most specific first

    Returns:
        The text with every placeholder replaced
    """
    rendered = template
    # Replace from the end so earlier positions stay valid
    for placeholder in reversed(_parser.extract_inline(template)):
        rendered = (
            rendered[: placeholder.start_pos]
            + _render_expression(placeholder.expression, scopes)
            + rendered[placeholder.end_pos :]
        )
    return rendered


def _run_text(run: Any) -> str:
    return run.text if isinstance(run, TextBlock) else str(run)


def render_rich_text(value: CellRichText, scopes: list) -> CellRichText:
    """
    Render placeholders inside rich text.

    A placeholder may be split over several styled runs ("{{cus", "tomer}}").
    Runs from an opening "{{" up to the run holding "}}" are joined,
    rendered together and written back with the first run's font.

    Args:
        value: Rich text cell value
        scopes: Data contexts, most specific first

    Returns:
        New rich text with placeholders substituted
    """
    result: list = []
    buffer: list = []
    in_placeholder = False

    for run in value:
        text = _run_text(run)

        if "{{" in text or in_placeholder:
            in_placeholder = True
            buffer.append(run)

            if "}}" in text:
                combined = "".join(_run_text(part) for part in buffer)
                rendered = render_interpolated_string(combined, scopes)
                font = getattr(buffer[0], "font", None)
                result.append(TextBlock(font, rendered) if font is not None else rendered)
                buffer = []
                in_placeholder = False
            continue

        result.append(run)

    if buffer:
        logger.debug("Unterminated placeholder in rich text left as written")
        result.extend(buffer)

    return CellRichText(result)


def render_cell(value: Any, scopes: list, options: Optional[RenderOptions] = None) -> Any:
    """
    Render one cell value against a scope stack.

    Whole-cell value and join placeholders keep their typed results. Table
    anchors come back unchanged. Any other text containing "{{" (including
    a whole-cell formula, which is only resolved against a table by the
    sheet renderer) is interpolated as text.

    Args:
        value: Raw cell value
        scopes: Data contexts, most specific first
        options: Render options

    Returns:
        The rendered cell value
    """
    match detect_placeholder(value):
        case ValuePlaceholder(path=path):
            return render_value(path, scopes, options)
        case JoinPlaceholder(path=path, separator=separator):
            return render_join(path, separator, scopes)
        case TablePlaceholder():
            return value

    if isinstance(value, str) and "{{" in value:
        return render_interpolated_string(value, scopes)

    if isinstance(value, CellRichText):
        return render_rich_text(value, scopes)

    return value
