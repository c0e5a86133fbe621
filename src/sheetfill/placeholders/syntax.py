"""Placeholder syntax definitions and patterns."""

import re
from typing import Pattern

FORMULA_TYPES = ("SUM", "AVERAGE", "COUNT", "MIN", "MAX")

_FORMULA_ALTERNATION = "|".join(FORMULA_TYPES)

# Whole-cell patterns, tried in this order against the trimmed cell text.
# {{#table items}} - Table anchor; the row below is the template row
TABLE_PATTERN: Pattern = re.compile(r"^\{\{#table\s+(.+?)\}\}$")

# {{#formula SUM items.price}} / {{#formula SUM C}} - Aggregate formula
FORMULA_PATTERN: Pattern = re.compile(
    rf"^\{{\{{#formula\s+({_FORMULA_ALTERNATION})\s+([A-Za-z_][\w.]*)\}}\}}$",
    re.IGNORECASE | re.ASCII,
)

# {{tags | join(", ")}} - Array joined into one cell
JOIN_PATTERN: Pattern = re.compile(r"""^\{\{(.+?)\s*\|\s*join\(["'](.+?)["']\)\}\}$""")

# {{customer.name}} - Single value
VALUE_PATTERN: Pattern = re.compile(r"^\{\{([^}]+)\}\}$")

# Any {{...}} span inside surrounding text
INLINE_PATTERN: Pattern = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")

# Expression forms recognised inside an inline span
INLINE_FORMULA_PATTERN: Pattern = re.compile(
    rf"^#formula\s+({_FORMULA_ALTERNATION})\s+([A-Za-z_][\w.]*)$",
    re.IGNORECASE | re.ASCII,
)
INLINE_JOIN_PATTERN: Pattern = re.compile(r"""^(.+?)\s*\|\s*join\(["'](.+?)["']\)$""")

# Field placeholders that map a template column to a field name
FIELD_PATTERN: Pattern = re.compile(r"\{\{(\w+(?:\.\w+)*)\}\}", re.ASCII)

COLUMN_LETTER_PATTERN: Pattern = re.compile(r"^[A-Z]+$", re.IGNORECASE)

MAX_COLUMN_LETTERS = 3


def is_column_letter(token: str) -> bool:
    """
    Check if a formula target should be read as a column reference.

    Any token of one to three letters qualifies, so a field literally
    named ``qty`` is also column-shaped.

    Args:
        token: The formula target token

    Returns:
        True if the token looks like a column letter reference
    """
    return bool(COLUMN_LETTER_PATTERN.match(token)) and len(token) <= MAX_COLUMN_LETTERS


def split_field_path(target: str) -> tuple[str, str]:
    """Split ``items.price`` into ``("items", "price")`` on the last dot."""
    last_dot = target.rfind(".")
    if last_dot > 0:
        return target[:last_dot], target[last_dot + 1 :]
    return "", target
