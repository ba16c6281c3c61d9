from __future__ import annotations

from dataclasses import dataclass, field

from .tagged_value import TaggedValue

"""SheetData model: one worksheet as produced by the reader.

Rows keep original worksheet order (blank rows already dropped) and every row
maps exactly the `columns` names, in header order, to a TaggedValue.
"""

__all__ = [
    "SheetData",
]


@dataclass(frozen=True)
class SheetData:
    sheet_name: str
    columns: list[str]  # header display names (header order)
    rows: list[dict[str, TaggedValue]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def column_values(self, column: str) -> list[TaggedValue]:
        """All values of one column, in row order."""
        return [row[column] for row in self.rows]
