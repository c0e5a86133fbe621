"""Placeholder detection and scoped path resolution.

Template cells carry expressions such as {{customer.name}},
{{tags | join(", ")}}, {{#table items}} and {{#formula SUM items.price}}.
This package classifies them and resolves their key paths against data.
"""

from .models import (
    FormulaPlaceholder,
    FormulaType,
    InlinePlaceholder,
    JoinPlaceholder,
    Placeholder,
    PlaceholderType,
    TablePlaceholder,
    ValuePlaceholder,
)
from .parser import PlaceholderParser, detect_placeholder
from .resolver import MISSING, get_path, resolve, tokenize_path

__all__ = [
    "FormulaPlaceholder",
    "FormulaType",
    "InlinePlaceholder",
    "JoinPlaceholder",
    "Placeholder",
    "PlaceholderType",
    "TablePlaceholder",
    "ValuePlaceholder",
    "PlaceholderParser",
    "detect_placeholder",
    "MISSING",
    "get_path",
    "resolve",
    "tokenize_path",
]
