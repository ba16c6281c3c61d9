"""Domain models for the workbook -> database importer.

Cell values (TaggedValue), sheet input (SheetData), inferred table structure
(TableDefinition) and run results.
"""

from .error_record import ErrorRecord
from .import_result import ImportResult, TableStat
from .sheet_data import SheetData
from .table_definition import ColumnDefinition, ColumnType, TableDefinition
from .tagged_value import TaggedValue, ValueKind

__all__ = [
    # Cell / sheet input
    "TaggedValue",
    "ValueKind",
    "SheetData",
    # Inferred structure
    "ColumnType",
    "ColumnDefinition",
    "TableDefinition",
    # Results
    "ErrorRecord",
    "ImportResult",
    "TableStat",
]
