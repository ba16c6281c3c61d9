from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import InvariantViolation
from ..models.table_definition import ColumnDefinition, ColumnType, TableDefinition
from ..models.tagged_value import TaggedValue, ValueKind

"""Row parameter binding.

Produces one bind value per column, in TableDefinition column order, which
is the order of the INSERT placeholders.

Policy by column type:
    STRING  -> text; empty_placeholder when the cell is absent
    NUMBER  -> float; None (NULL) when absent
    DATE    -> datetime; None (NULL) when absent
    BOOLEAN -> bool; None (NULL) when absent
    EMPTY   -> empty_placeholder for every row
"""

__all__ = [
    "DEFAULT_EMPTY_PLACEHOLDER",
    "bind_value",
    "bind_row",
]

DEFAULT_EMPTY_PLACEHOLDER = ""


def bind_value(column: ColumnDefinition, value: TaggedValue, empty_placeholder: str = DEFAULT_EMPTY_PLACEHOLDER) -> Any:
    """Bind value for one cell of `column`.

    Raises:
        InvariantViolation: the value's kind contradicts the column type
    """
    col_type = column.type
    if not col_type.accepts(value.kind):
        raise InvariantViolation(
            f"column '{column.display_name}' ({col_type.name}) got a {value.kind.name} value"
        )
    if col_type is ColumnType.EMPTY:
        return empty_placeholder
    if col_type is ColumnType.STRING:
        return empty_placeholder if value.is_empty else value.as_string()
    if value.kind is ValueKind.EMPTY:
        return None
    if col_type is ColumnType.NUMBER:
        return value.as_number()
    if col_type is ColumnType.DATE:
        return value.as_datetime()
    if col_type is ColumnType.BOOLEAN:
        return value.as_boolean()
    raise InvariantViolation(f"column '{column.display_name}': unknown column type {col_type!r}")


def bind_row(
    definition: TableDefinition,
    row: Mapping[str, TaggedValue],
    empty_placeholder: str = DEFAULT_EMPTY_PLACEHOLDER,
) -> list[Any]:
    """Bind values for one row, positionally aligned with the INSERT placeholders."""
    params: list[Any] = []
    for column in definition.columns:
        try:
            value = row[column.display_name]
        except KeyError:
            raise InvariantViolation(
                f"sheet '{definition.sheet_name}': row has no value for column '{column.display_name}'"
            ) from None
        params.append(bind_value(column, value, empty_placeholder))
    return params
