"""Typed value rendering and array joining."""

import json
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime, time, timedelta, timezone
from numbers import Number
from typing import Any, Optional, Pattern, Union

from ..placeholders.resolver import get_path, resolve
from ..placeholders.syntax import split_field_path
from .models import RenderOptions

# Strict ISO-8601 date or date-time. "2024-01-15-report" must not match.
ISO_DATE_PATTERN: Pattern = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:T(\d{2}):(\d{2})(?::(\d{2}))?(?:\.(\d+))?(Z|[+-]\d{2}:?\d{2})?)?$"
)

NUMBER_PATTERN: Pattern = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def to_number(text: str) -> Optional[Union[int, float]]:
    """Parse a fully numeric string, or return None."""
    text = text.strip()
    if not NUMBER_PATTERN.match(text):
        return None
    if re.fullmatch(r"[+-]?\d+", text):
        return int(text)
    return float(text)


def parse_iso_datetime(text: str) -> Optional[datetime]:
    """
    Parse a strict ISO-8601 date or date-time string.

    Offsets are applied and the result is returned as naive UTC, since
    worksheet cells cannot hold time zones. Strings that match the shape
    but name an impossible date are rejected.

    Args:
        text: Candidate string

    Returns:
        The parsed datetime, or None
    """
    match = ISO_DATE_PATTERN.match(text)
    if not match:
        return None

    year, month, day, hour, minute, second, fraction, offset = match.groups()
    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    try:
        parsed = datetime(
            int(year),
            int(month),
            int(day),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            microsecond,
        )
    except ValueError:
        return None

    if offset:
        if offset == "Z":
            tz = timezone.utc
        else:
            sign = -1 if offset[0] == "-" else 1
            digits = offset[1:].replace(":", "")
            tz = timezone(sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:])))
        parsed = parsed.replace(tzinfo=tz).astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_json(value: Any) -> str:
    """Serialize a structure compactly, falling back to str() for odd types."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def stringify(value: Any) -> str:
    """
    Convert a resolved value to display text.

    Integral floats lose their ".0", booleans render lower-case and
    structures render as compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Mapping) or (
        isinstance(value, Sequence) and not isinstance(value, (str, bytes))
    ):
        return to_json(value)
    return str(value)


def render_value(path: str, scopes: list, options: Optional[RenderOptions] = None) -> Any:
    """
    Render a {{path}} placeholder, keeping spreadsheet-friendly types.

    Args:
        path: Key path to resolve
        scopes: Data contexts, most specific first
        options: Render options (numeric string parsing)

    Returns:
        A string, number, boolean or datetime
    """
    options = options or RenderOptions()
    value = resolve(path, scopes)

    if value is None:
        return ""
    if isinstance(value, (datetime, date, time)):
        return value
    if isinstance(value, (bool, Number)):
        return value
    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed == "":
            return value

        if options.auto_parse_numbers:
            number = to_number(trimmed)
            if number is not None:
                return number

        parsed = parse_iso_datetime(trimmed)
        if parsed is not None:
            return parsed

        return value

    return to_json(value)


def _is_filled_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0


def render_join(path: str, separator: str, scopes: list) -> str:
    """
    Render a {{path | join("sep")}} placeholder.

    ``items.name`` joins the ``name`` of every element of ``items``. When
    that projection does not apply, the whole path is joined as an array
    of scalars; empty values and nested structures are dropped.

    Args:
        path: Array path, optionally ending in a property name
        separator: Text placed between elements
        scopes: Data contexts, most specific first

    Returns:
        The joined text, or "" for missing or empty arrays
    """
    array_path, property_name = split_field_path(path)

    if array_path:
        items = resolve(array_path, scopes)
        if _is_filled_list(items):
            parts = (stringify(get_path(item, property_name, None)) for item in items)
            return separator.join(part for part in parts if part != "")

    items = resolve(path, scopes)
    if not _is_filled_list(items):
        return ""

    parts = (
        stringify(item)
        for item in items
        if item is not None and not isinstance(item, Mapping)
    )
    return separator.join(part for part in parts if part != "")
