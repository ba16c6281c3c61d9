from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

"""Import run result models.

Aggregates per-table statistics for the SUMMARY line. Purely informational:
nothing here feeds back into inference or statement generation.
"""

__all__ = [
    "TableStat",
    "ImportResult",
]


@dataclass(frozen=True)
class TableStat:
    """Per-table statistics."""
    sheet_name: str  # 元シート名
    table_name: str  # 生成テーブル名
    columns: int
    inserted_rows: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ImportResult:
    """Aggregated result of one or more import runs."""
    tables_created: int
    total_inserted_rows: int
    skipped_sheets: int  # sheets without data rows
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    table_stats: list[TableStat] = field(default_factory=list)

    @classmethod
    def combine(cls, results: list[ImportResult], start_time: datetime, end_time: datetime) -> ImportResult:
        """Merge several workbook results into one (CLI runs over many files)."""
        stats = [s for r in results for s in r.table_stats]
        rows = sum(r.total_inserted_rows for r in results)
        elapsed = (end_time - start_time).total_seconds()
        return cls(
            tables_created=sum(r.tables_created for r in results),
            total_inserted_rows=rows,
            skipped_sheets=sum(r.skipped_sheets for r in results),
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=elapsed,
            throughput_rows_per_sec=rows / elapsed if elapsed > 0 else 0.0,
            table_stats=stats,
        )
