from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line rendering.

Format:
    SUMMARY tables={n} rows={rows} skipped_sheets={k} elapsed_sec={s} throughput_rps={r}
"""

__all__ = [
    "render_summary_body",
    "render_summary_line",
]


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_body(result: ImportResult) -> str:
    """The key=value part of the SUMMARY line, without the label."""
    return (
        f"tables={result.tables_created} "
        f"rows={result.total_inserted_rows} "
        f"skipped_sheets={result.skipped_sheets} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for an import result.

    >>> from datetime import datetime, timezone
    >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> render_summary_line(ImportResult(
    ...     tables_created=1, total_inserted_rows=1000, skipped_sheets=0,
    ...     start_time=t, end_time=t, elapsed_seconds=2.0, throughput_rows_per_sec=500.0))
    'SUMMARY tables=1 rows=1000 skipped_sheets=0 elapsed_sec=2 throughput_rps=500'
    """
    return f"SUMMARY {render_summary_body(result)}"

