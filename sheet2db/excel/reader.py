from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..errors import SheetHeaderError, UnsupportedCellError, WorkbookStructureError
from ..models.sheet_data import SheetData
from ..models.tagged_value import TaggedValue

"""Excel reader: workbook -> {sheet name: SheetData}.

- header_row (0-based, default first row) holds the column names; every header
  cell must be non-blank text and names must be unique within the sheet
- rows below the header are data rows; rows whose cells are all blank are dropped
- a data row must not be wider than the header
- each cell becomes a TaggedValue (string / number / datetime / boolean / empty)

Sheets without data rows are returned with an empty row list; the schema
builder skips them.
"""

__all__ = [
    "read_excel_file",
    "normalize_sheet",
    "to_tagged_value",
    "read_workbook",
]

logger = logging.getLogger(__name__)


def read_excel_file(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read an Excel file returning raw DataFrames keyed by sheet name (workbook order).

    Cells are read without header handling or NA-string conversion so that
    text like "NA" stays text.

    Raises:
        UnsupportedCellError: a sheet contains an Excel error value
    """
    targets = set(target_sheets) if target_sheets is not None else None
    dfs: dict[str, pd.DataFrame] = {}
    with pd.ExcelFile(path, engine="openpyxl") as xls:
        for name in xls.sheet_names:
            if targets is not None and str(name) not in targets:
                continue
            _reject_error_cells(xls, str(name))
            dfs[str(name)] = xls.parse(name, header=None, keep_default_na=False, na_values=[])
    return dfs


def _reject_error_cells(xls: pd.ExcelFile, sheet_name: str) -> None:
    """Raise on the first formula error cell (#DIV/0!, #N/A, ...).

    pandas turns such cells into NaN, which would read as blank.
    """
    for row in xls.book[sheet_name].iter_rows():
        for cell in row:
            if cell.data_type == "e":
                raise UnsupportedCellError(
                    f"sheet '{sheet_name}', row {cell.row}, column {cell.column_letter}: "
                    f"error cell {cell.value!r} is not supported"
                )


def to_tagged_value(val: Any, *, sheet_name: str, row_number: int, column: str) -> TaggedValue:
    """Convert one raw cell value to a TaggedValue.

    row_number is the 1-based worksheet row, used in error messages only.

    Raises:
        UnsupportedCellError: value has no tagged value kind (e.g. time of day)
    """
    if val is None or val is pd.NaT:
        return TaggedValue.empty()
    # bool 判定は数値より先 (bool は int のサブクラス)
    if isinstance(val, (bool, np.bool_)):
        return TaggedValue.boolean(bool(val))
    if isinstance(val, str):
        return TaggedValue.string(val)
    if isinstance(val, (int, float, np.integer, np.floating)):
        if pd.isna(val):
            return TaggedValue.empty()
        return TaggedValue.number(float(val))
    if isinstance(val, pd.Timestamp):
        return TaggedValue.date_time(val.to_pydatetime())
    if isinstance(val, datetime):
        return TaggedValue.date_time(val)
    if isinstance(val, date):
        return TaggedValue.date_time(datetime(val.year, val.month, val.day))
    raise UnsupportedCellError(
        f"sheet '{sheet_name}', row {row_number}, column '{column}': "
        f"unsupported cell type: {type(val).__name__}"
    )


def _is_blank(val: Any) -> bool:
    if isinstance(val, str):
        return val == ""
    return val is None or bool(pd.isna(val))


def _read_header(header_cells: list[Any], sheet_name: str, header_row: int) -> list[str]:
    # trailing blank cells are not part of the header (checked against data width later)
    while header_cells and _is_blank(header_cells[-1]):
        header_cells.pop()
    if not header_cells:
        raise SheetHeaderError(f"sheet '{sheet_name}': header row must define at least one column")

    columns: list[str] = []
    for idx, cell in enumerate(header_cells):
        if not isinstance(cell, str):
            raise SheetHeaderError(
                f"sheet '{sheet_name}', row {header_row + 1}, column {idx + 1}: "
                f"header cells must be text, got {type(cell).__name__}"
            )
        if not cell.strip():
            raise SheetHeaderError(
                f"sheet '{sheet_name}', row {header_row + 1}, column {idx + 1}: "
                "column names must be non-blank"
            )
        columns.append(cell)

    duplicated = sorted({c for c in columns if columns.count(c) > 1})
    if duplicated:
        raise SheetHeaderError(f"sheet '{sheet_name}': duplicated column names: {duplicated}")
    return columns


def normalize_sheet(df: pd.DataFrame, sheet_name: str, header_row: int = 0) -> SheetData:
    """Turn a raw DataFrame (header=None) into SheetData.

    Raises:
        SheetHeaderError: header row is invalid
        WorkbookStructureError: a data row is wider than the header
        UnsupportedCellError: a cell cannot be converted
    """
    if df.shape[0] <= header_row:
        logger.info(f"sheet '{sheet_name}' does not have any data. Skipping.")
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])

    columns = _read_header(df.iloc[header_row].tolist(), sheet_name, header_row)
    width = len(columns)

    rows: list[dict[str, TaggedValue]] = []
    for offset, raw in enumerate(df.iloc[header_row + 1:].itertuples(index=False, name=None)):
        row_number = header_row + offset + 2  # 1-based worksheet row
        cells = list(raw)
        if all(_is_blank(v) for v in cells):
            logger.debug(f"sheet '{sheet_name}', row {row_number}: all cells are empty. Skipping row.")
            continue
        extra = [v for v in cells[width:] if not _is_blank(v)]
        if extra:
            raise WorkbookStructureError(
                f"sheet '{sheet_name}', row {row_number}: row has more cells than the header "
                f"({width} columns)"
            )
        row: dict[str, TaggedValue] = {}
        for idx, column in enumerate(columns):
            val = cells[idx] if idx < len(cells) else None
            if isinstance(val, str) and val == "":
                val = None
            row[column] = to_tagged_value(val, sheet_name=sheet_name, row_number=row_number, column=column)
        rows.append(row)

    if not rows:
        logger.info(f"sheet '{sheet_name}' has only a header row and no data. Skipping.")
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)


def read_workbook(path: Path, header_row: int = 0) -> dict[str, SheetData]:
    """Read every sheet of a workbook into SheetData (workbook sheet order)."""
    raw = read_excel_file(path)
    return {name: normalize_sheet(df, name, header_row=header_row) for name, df in raw.items()}
