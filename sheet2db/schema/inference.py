from __future__ import annotations

import logging
from collections.abc import Iterable

from ..errors import SchemaInferenceError
from ..models.table_definition import ColumnType
from ..models.tagged_value import TaggedValue, ValueKind

"""Column type unification and string column sizing.

One relational column needs one SQL type. Mixed-kind columns are rejected
rather than widened to text so data quality problems surface at import time.
"""

__all__ = [
    "unify_column_type",
    "max_string_length",
]

logger = logging.getLogger(__name__)


def unify_column_type(values: Iterable[TaggedValue], *, sheet_name: str, column_name: str) -> ColumnType:
    """Reduce the values observed in one column to a single column type.

    EMPTY values are wildcards: they never conflict with anything.

    Returns:
        EMPTY if every value is EMPTY, else the single non-empty kind's type

    Raises:
        SchemaInferenceError: two or more distinct non-empty kinds are present
    """
    kinds = {v.kind for v in values if v.kind is not ValueKind.EMPTY}
    if not kinds:
        logger.debug(f"sheet '{sheet_name}': column '{column_name}' has no values")
        return ColumnType.EMPTY
    if len(kinds) > 1:
        raise SchemaInferenceError(sheet_name, column_name, (k.value for k in kinds))
    (kind,) = kinds
    return ColumnType.from_value_kind(kind)


def max_string_length(values: Iterable[TaggedValue]) -> int:
    """Longest text (in characters) among the STRING values of a column.

    EMPTY cells are ignored; a column of only EMPTY cells measures 0.

    Raises:
        InvariantViolation: a non-string, non-empty value is present (the column
            was not unified to STRING)
    """
    longest = 0
    for v in values:
        if v.kind is ValueKind.EMPTY:
            continue
        longest = max(longest, len(v.as_string()))
    return longest
