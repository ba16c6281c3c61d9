from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from dataclasses import dataclass

from ..errors import InvariantViolation
from ..models.sheet_data import SheetData
from ..models.table_definition import ColumnDefinition, ColumnType, TableDefinition
from .inference import max_string_length, unify_column_type
from .naming import DEFAULT_MAX_LENGTH, DEFAULT_MAX_SUFFIX, normalize_unique

"""Table definition builder: SheetData -> TableDefinition.

Table names are normalized once across every sheet name of the workbook before
any per-sheet column work, so table-name collisions are resolved workbook-wide.
Column names are normalized per sheet.
"""

__all__ = [
    "NamingOptions",
    "build_table_definition",
    "build_table_definitions",
]

logger = logging.getLogger(__name__)

TABLE_NAME_FALLBACK = "sheet"
COLUMN_NAME_FALLBACK = "col"


@dataclass(frozen=True)
class NamingOptions:
    """Identifier policy (config: naming section)."""
    max_identifier_length: int = DEFAULT_MAX_LENGTH
    max_suffix: int = DEFAULT_MAX_SUFFIX


def _check_rows(sheet: SheetData) -> None:
    if sheet.is_empty:
        raise InvariantViolation(f"sheet '{sheet.sheet_name}': no data rows to build a table from")
    expected = list(sheet.columns)
    for idx, row in enumerate(sheet.rows):
        if list(row.keys()) != expected:
            raise InvariantViolation(
                f"sheet '{sheet.sheet_name}', data row {idx}: columns {list(row.keys())} "
                f"do not match header {expected}"
            )


def build_table_definition(
    sheet: SheetData, table_name: str, naming: NamingOptions = NamingOptions()
) -> TableDefinition:
    """Infer the table definition of one non-empty sheet.

    Raises:
        SchemaInferenceError: a column mixes value kinds
        NameGenerationError: column names cannot be made unique
        InvariantViolation: sheet shape breaks the reader's guarantees
    """
    _check_rows(sheet)

    display_names = list(sheet.columns)
    db_names = normalize_unique(
        display_names,
        fallback=COLUMN_NAME_FALLBACK,
        max_length=naming.max_identifier_length,
        max_suffix=naming.max_suffix,
    )
    column_types: list[ColumnType] = []
    lengths: list[int | None] = []
    for name in display_names:
        values = sheet.column_values(name)
        col_type = unify_column_type(values, sheet_name=sheet.sheet_name, column_name=name)
        column_types.append(col_type)
        # 文字列列のみ長さを測定 (他の型は長さなし)
        lengths.append(max_string_length(values) if col_type is ColumnType.STRING else None)

    if not (len(display_names) == len(db_names) == len(column_types) == len(lengths)):
        raise InvariantViolation(
            f"sheet '{sheet.sheet_name}': column count mismatch "
            f"names={len(db_names)} types={len(column_types)} lengths={len(lengths)}"
        )

    columns = tuple(
        ColumnDefinition(display_name=d, db_name=n, type=t, max_string_length=ln)
        for d, n, t, ln in zip(display_names, db_names, column_types, lengths, strict=True)
    )
    definition = TableDefinition(sheet_name=sheet.sheet_name, table_name=table_name, columns=columns)
    logger.debug(
        f"sheet '{sheet.sheet_name}' -> table {table_name}: "
        + ", ".join(f"{c.db_name}:{c.type.name}" for c in columns)
    )
    return definition


def build_table_definitions(
    workbook: Mapping[str, SheetData],
    naming: NamingOptions = NamingOptions(),
    taken_table_names: Collection[str] = (),
) -> list[TableDefinition]:
    """Build one TableDefinition per non-empty sheet, in workbook order.

    Sheets without data rows are skipped (no definition, no error).
    Table names never repeat one of `taken_table_names` (tables already created
    by earlier workbooks of the same run).
    """
    sheet_names = list(workbook.keys())
    table_names = normalize_unique(
        sheet_names,
        fallback=TABLE_NAME_FALLBACK,
        max_length=naming.max_identifier_length,
        max_suffix=naming.max_suffix,
        taken=taken_table_names,
    )
    definitions: list[TableDefinition] = []
    for sheet_name, table_name in zip(sheet_names, table_names, strict=True):
        sheet = workbook[sheet_name]
        if sheet.is_empty:
            logger.info(f"sheet '{sheet_name}' has no data rows. Skipping.")
            continue
        definitions.append(build_table_definition(sheet, table_name, naming))
    return definitions
