"""Resolve key paths against a stack of data scopes."""

import re
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, Pattern

from ..errors import InvalidPathError

# Marks "no value at this path"; distinct from a stored None
MISSING = object()

# items.0.name, items[0].name, meta["display name"]
_PATH_TOKEN: Pattern = re.compile(r"""[^.\[\]]+|\[(?:(\d+)|(["'])(.*?)\2)\]""")


def tokenize_path(path: str) -> list[str]:
    """
    Split a key path into segments.

    Args:
        path: Dotted path, optionally with bracketed indexes or quoted keys

    Returns:
        Path segments; empty for an empty path

    Raises:
        InvalidPathError: If brackets are unbalanced
    """
    segments = []
    consumed = 0
    for match in _PATH_TOKEN.finditer(path):
        gap = path[consumed : match.start()]
        if gap.strip("."):
            raise InvalidPathError(path)
        consumed = match.end()

        if match.group(1) is not None:
            segments.append(match.group(1))
        elif match.group(2) is not None:
            segments.append(match.group(3))
        else:
            segments.append(match.group(0))

    if path[consumed:].strip("."):
        raise InvalidPathError(path)
    return segments


def _lookup(obj: Any, segment: str) -> Any:
    if obj is None:
        return MISSING
    if isinstance(obj, Mapping):
        return obj[segment] if segment in obj else MISSING
    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes)):
        if segment.isdigit() and int(segment) < len(obj):
            return obj[int(segment)]
        return MISSING
    if isinstance(obj, (str, bytes, int, float, bool)) or segment.startswith("_"):
        return MISSING
    return getattr(obj, segment, MISSING)


def get_path(obj: Any, path: str, default: Any = MISSING) -> Any:
    """
    Read a nested value by key path.

    A mapping key equal to the whole path wins over segment-wise lookup,
    so ``{"a.b": 1}`` resolves ``"a.b"`` to 1.

    Args:
        obj: Mapping, sequence or plain object to read from
        path: Key path
        default: Returned when any segment is missing

    Returns:
        The value at the path, or ``default``
    """
    if isinstance(obj, Mapping) and path in obj:
        return obj[path]

    segments = tokenize_path(path)
    if not segments:
        return default

    current = obj
    for segment in segments:
        current = _lookup(current, segment)
        if current is MISSING:
            return default
    return current


def resolve(path: str, scopes: Iterable[Any] = ()) -> Any:
    """
    Resolve a path against scopes ordered most specific first.

    The first scope that defines the path wins, even when it stores None.
    Absent and None results both come back as an empty string so callers
    never render a literal "None".

    Args:
        path: Key path to resolve
        scopes: Data contexts, local to global

    Returns:
        The resolved value, or "" when no scope defines it
    """
    for scope in scopes:
        value = get_path(scope, path)
        if value is not MISSING:
            return "" if value is None else value
    return ""
