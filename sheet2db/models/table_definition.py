from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..errors import InvariantViolation
from .tagged_value import ValueKind

"""Table / column definitions inferred from one sheet.

A TableDefinition is built once per non-empty sheet and never mutated
afterwards; the statement generator and the orchestrator only read it.
"""

__all__ = [
    "ColumnType",
    "ColumnDefinition",
    "TableDefinition",
]


class ColumnType(Enum):
    """Resolved type of a database column."""
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    EMPTY = "empty"  # every cell of the column was absent

    @classmethod
    def from_value_kind(cls, kind: ValueKind) -> ColumnType:
        if kind is ValueKind.STRING:
            return cls.STRING
        if kind is ValueKind.NUMBER:
            return cls.NUMBER
        if kind is ValueKind.DATETIME:
            return cls.DATE
        if kind is ValueKind.BOOLEAN:
            return cls.BOOLEAN
        if kind is ValueKind.EMPTY:
            return cls.EMPTY
        raise InvariantViolation(f"unknown value kind: {kind!r}")

    def accepts(self, kind: ValueKind) -> bool:
        """True when a value of `kind` may appear in a column of this type."""
        return kind is ValueKind.EMPTY or ColumnType.from_value_kind(kind) is self


@dataclass(frozen=True)
class ColumnDefinition:
    """One column of a target table.

    max_string_length is the longest observed text (characters) and is only
    meaningful for STRING columns; it is None for every other type.
    """
    display_name: str  # header cell text as found in the sheet
    db_name: str  # normalized, unique within the table
    type: ColumnType
    max_string_length: int | None = None

    def __post_init__(self) -> None:
        if self.type is ColumnType.STRING:
            if self.max_string_length is None or self.max_string_length < 0:
                raise InvariantViolation(
                    f"column '{self.display_name}': STRING column needs a non-negative length, "
                    f"got {self.max_string_length!r}"
                )
        elif self.max_string_length is not None:
            raise InvariantViolation(
                f"column '{self.display_name}': {self.type.name} column must not carry a string length"
            )


@dataclass(frozen=True)
class TableDefinition:
    """Structural definition of one table (one per importable sheet)."""
    sheet_name: str
    table_name: str
    columns: tuple[ColumnDefinition, ...]

    def __post_init__(self) -> None:
        if not self.columns:
            raise InvariantViolation(f"table '{self.table_name}' has no columns")
        seen: set[str] = set()
        for col in self.columns:
            if col.db_name in seen:
                raise InvariantViolation(
                    f"table '{self.table_name}': duplicated column name '{col.db_name}'"
                )
            seen.add(col.db_name)

    @property
    def column_names(self) -> list[str]:
        """Display names in column order."""
        return [c.display_name for c in self.columns]

    @property
    def db_column_names(self) -> list[str]:
        return [c.db_name for c in self.columns]

    def __len__(self) -> int:
        return len(self.columns)
