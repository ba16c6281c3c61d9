from __future__ import annotations

from collections.abc import Iterable

"""Error kinds surfaced by the import core.

- SchemaInferenceError / NameGenerationError: bad input data (user fixable)
- InvariantViolation: internal consistency check failed (importer defect)
- WorkbookStructureError: raised by the reader before inference runs

InvariantViolation intentionally does not share the data error base so callers
can tell "bad workbook" apart from "bug in the importer".
"""

__all__ = [
    "Sheet2DbError",
    "SchemaInferenceError",
    "NameGenerationError",
    "WorkbookStructureError",
    "SheetHeaderError",
    "UnsupportedCellError",
    "InvariantViolation",
]


class Sheet2DbError(Exception):
    """Base class for data errors found in the imported workbook."""


class SchemaInferenceError(Sheet2DbError):
    """A column holds values of more than one non-empty kind."""

    def __init__(self, sheet_name: str, column_name: str, kinds: Iterable[str]) -> None:
        self.sheet_name = sheet_name
        self.column_name = column_name
        self.kinds = sorted(kinds)
        super().__init__(
            f"sheet '{sheet_name}': column '{column_name}' has cells of more than one type "
            f"({', '.join(self.kinds)})"
        )


class NameGenerationError(Sheet2DbError):
    """Unique SQL identifiers could not be generated for the given names."""

    def __init__(self, names: Iterable[str], reason: str) -> None:
        self.names = list(names)
        super().__init__(f"cannot generate unique name for {self.names!r}: {reason}")


class WorkbookStructureError(Sheet2DbError):
    """Workbook layout is not importable (header shape, cell types, row width)."""


class SheetHeaderError(WorkbookStructureError):
    """Header row is missing or contains non-text / blank / duplicated names."""


class UnsupportedCellError(WorkbookStructureError):
    """Cell holds a value that has no tagged value kind."""


class InvariantViolation(Exception):
    """Internal consistency check failed. Indicates a defect, not bad data."""
