"""Data models for placeholder detection."""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PlaceholderType(str, Enum):
    """Kind of whole-cell placeholder."""

    VALUE = "value"  # {{path}}
    JOIN = "join"  # {{path | join(", ")}}
    TABLE = "table"  # {{#table path}}
    FORMULA = "formula"  # {{#formula SUM target}}


class FormulaType(str, Enum):
    """Supported aggregate functions."""

    SUM = "SUM"
    AVERAGE = "AVERAGE"
    COUNT = "COUNT"
    MIN = "MIN"
    MAX = "MAX"


class _Placeholder(BaseModel):
    model_config = ConfigDict(frozen=True)


class ValuePlaceholder(_Placeholder):
    """A single value looked up by path."""

    kind: Literal[PlaceholderType.VALUE] = PlaceholderType.VALUE
    path: str


class JoinPlaceholder(_Placeholder):
    """An array flattened into a delimited string."""

    kind: Literal[PlaceholderType.JOIN] = PlaceholderType.JOIN
    path: str
    separator: str


class TablePlaceholder(_Placeholder):
    """Anchor of an array-backed table; the next row is its template."""

    kind: Literal[PlaceholderType.TABLE] = PlaceholderType.TABLE
    path: str


class FormulaPlaceholder(_Placeholder):
    """
    Aggregate over a table column or an array field.

    Exactly one targeting form is populated: ``column`` for a column letter
    target, or ``field_name`` (plus ``array_path`` when the target was
    dotted) otherwise.
    """

    kind: Literal[PlaceholderType.FORMULA] = PlaceholderType.FORMULA
    formula_type: FormulaType
    target: str  # Target token as written (e.g. "items.price", "C")
    column: Optional[str] = None  # Upper-cased column letter(s)
    array_path: str = ""  # "items" for "items.price"; empty for bare names
    field_name: Optional[str] = None  # "price" for "items.price"


Placeholder = Annotated[
    Union[ValuePlaceholder, JoinPlaceholder, TablePlaceholder, FormulaPlaceholder],
    Field(discriminator="kind"),
]


class InlinePlaceholder(BaseModel):
    """A {{...}} span found inside surrounding text."""

    expression: str  # Trimmed text between the braces
    syntax: str  # Original syntax including braces
    start_pos: int = 0
    end_pos: int = 0
