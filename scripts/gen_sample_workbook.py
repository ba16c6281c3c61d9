#!/usr/bin/env python3
"""Generate a synthetic sample workbook for trying out sheet2db.

Layout of every sheet:
- Row 1: header row with column names (display names, spaces/case on purpose)
- Row 2+: data rows

Sheets:
- "Orders": number / string / boolean / date columns, some sparse cells
- "Order Items": duplicated-looking headers that normalize to the same name
- "Empty Sheet": header only (skipped by the importer)
"""
from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd


def generate_orders(rows: int, seed: int = 42) -> pd.DataFrame:
    """Orders sheet with mixed column types and ~10% blank notes."""
    rng = np.random.default_rng(seed)
    start = datetime(2024, 1, 1)
    data: dict[str, list[Any]] = {
        "Order ID": list(range(1, rows + 1)),
        "Customer Name": [f"Customer {rng.integers(1000, 9999)}" for _ in range(rows)],
        "Amount": np.round(rng.uniform(0.01, 9999.99, rows), 2).tolist(),
        "Paid": rng.choice([True, False], rows).tolist(),
        "Order Date": [start + timedelta(days=int(d)) for d in rng.integers(0, 365, rows)],
        "Notes": [None if rng.random() < 0.1 else f"note {j}" for j in range(rows)],
    }
    return pd.DataFrame(data)


def generate_items(rows: int, seed: int = 7) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    # "Qty" and "QTY" both normalize to "qty" -> second becomes "qty_2"
    return pd.DataFrame({
        "Order ID": rng.integers(1, max(rows, 2), rows).tolist(),
        "Product": rng.choice(["Widget A", "Widget B", "Gadget"], rows).tolist(),
        "Qty": rng.integers(1, 10, rows).tolist(),
        "QTY": rng.integers(1, 10, rows).tolist(),
    })


def write_workbook(path: Path, rows: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        generate_orders(rows).to_excel(writer, sheet_name="Orders", index=False)
        generate_items(rows * 3).to_excel(writer, sheet_name="Order Items", index=False)
        pd.DataFrame(columns=["Anything"]).to_excel(writer, sheet_name="Empty Sheet", index=False)
    return path


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Generate a sample workbook for sheet2db")
    p.add_argument("--rows", type=int, default=100, help="Data rows in the Orders sheet")
    p.add_argument("--output", default="data/sample.xlsx", help="Output .xlsx path")
    args = p.parse_args(argv)
    if args.rows < 1:
        print("--rows must be positive", file=sys.stderr)
        return 1
    out = write_workbook(Path(args.output), args.rows)
    print(f"written: {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
