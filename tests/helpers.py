from __future__ import annotations
from pathlib import Path
from typing import Any

import pandas as pd

from sheet2db.models.sheet_data import SheetData
from sheet2db.models.tagged_value import TaggedValue


def make_sheet(name: str, columns: list[str], rows: list[list[Any]]) -> SheetData:
    """Build SheetData from plain Python values (None -> EMPTY)."""
    return SheetData(
        sheet_name=name,
        columns=columns,
        rows=[{c: TaggedValue.of(v) for c, v in zip(columns, r, strict=True)} for r in rows],
    )


def make_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write a real .xlsx; every list is written as a plain worksheet row (no pandas header)."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path
