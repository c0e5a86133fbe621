"""Parser for detecting placeholders in cell text."""

import logging
from typing import Any, Optional

from .models import (
    FormulaPlaceholder,
    FormulaType,
    InlinePlaceholder,
    JoinPlaceholder,
    Placeholder,
    TablePlaceholder,
    ValuePlaceholder,
)
from .syntax import (
    FORMULA_PATTERN,
    INLINE_PATTERN,
    JOIN_PATTERN,
    TABLE_PATTERN,
    VALUE_PATTERN,
    is_column_letter,
    split_field_path,
)

logger = logging.getLogger(__name__)


class PlaceholderParser:
    """Classify cell text as one of the whole-cell placeholder kinds."""

    def detect(self, cell_value: Any) -> Optional[Placeholder]:
        """
        Detect the placeholder a cell holds.

        The whole trimmed text must match. Patterns are tried in a fixed
        order: table anchor, formula, join, then plain value. Text that
        mixes a placeholder with other content matches none of them and is
        left to inline interpolation.

        Args:
            cell_value: Raw cell value; non-strings never match

        Returns:
            The detected placeholder, or None
        """
        if not isinstance(cell_value, str):
            return None

        text = cell_value.strip()

        table_match = TABLE_PATTERN.match(text)
        if table_match:
            return TablePlaceholder(path=table_match.group(1).strip())

        formula_match = FORMULA_PATTERN.match(text)
        if formula_match:
            return self._parse_formula(formula_match.group(1), formula_match.group(2))

        join_match = JOIN_PATTERN.match(text)
        if join_match:
            return JoinPlaceholder(
                path=join_match.group(1).strip(),
                separator=join_match.group(2),
            )

        value_match = VALUE_PATTERN.match(text)
        if value_match:
            return ValuePlaceholder(path=value_match.group(1).strip())

        return None

    def _parse_formula(self, formula_type: str, target: str) -> FormulaPlaceholder:
        """Build a formula placeholder from its type and target tokens."""
        kind = FormulaType(formula_type.upper())

        if is_column_letter(target):
            return FormulaPlaceholder(
                formula_type=kind,
                target=target,
                column=target.upper(),
            )

        array_path, field_name = split_field_path(target)
        return FormulaPlaceholder(
            formula_type=kind,
            target=target,
            array_path=array_path,
            field_name=field_name,
        )

    def extract_inline(self, text: str) -> list[InlinePlaceholder]:
        """
        Extract every {{...}} span from a piece of text.

        Args:
            text: Text that may contain several placeholders

        Returns:
            Spans in order of appearance
        """
        placeholders = []
        for match in INLINE_PATTERN.finditer(text):
            placeholders.append(
                InlinePlaceholder(
                    expression=match.group(1).strip(),
                    syntax=match.group(0),
                    start_pos=match.start(),
                    end_pos=match.end(),
                )
            )
        logger.debug(f"Found {len(placeholders)} inline placeholder(s)")
        return placeholders


_parser = PlaceholderParser()


def detect_placeholder(cell_value: Any) -> Optional[Placeholder]:
    """Module-level shortcut for :meth:`PlaceholderParser.detect`."""
    return _parser.detect(cell_value)
