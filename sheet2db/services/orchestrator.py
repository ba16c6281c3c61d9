from __future__ import annotations

import logging
import time
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ImportConfig
from ..db.executor import StatementExecutor
from ..excel.reader import read_workbook
from ..models.import_result import ImportResult, TableStat
from ..models.sheet_data import SheetData
from ..models.table_definition import TableDefinition
from ..schema.builder import NamingOptions, build_table_definitions
from ..sql.statements import DEFAULT_DIALECT, SqlDialect, render_create_table, render_insert
from .binding import DEFAULT_EMPTY_PLACEHOLDER, bind_row
from .progress import ProgressTracker

"""Import orchestration: workbook -> CREATE TABLE + INSERT per row.

Flow for one workbook (one import run):
1. Infer every table definition and render its statements (no I/O). Any
   SchemaInferenceError / NameGenerationError stops the run here, before a
   single statement is executed.
2. For each table in sheet order: execute CREATE TABLE, then one INSERT per
   row in row order with the row's bound values.

Fail-fast: nothing is caught here. Executor errors propagate as-is; the
transaction scope belongs to the executor / connection owner.
"""

__all__ = [
    "ProcessingError",
    "ImportSettings",
    "ImportPlan",
    "scan_excel_files",
    "plan_import",
    "import_workbook",
    "import_file",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error outside the import core (e.g. source directory problems)."""


@dataclass(frozen=True)
class ImportSettings:
    """Policy knobs for one import run."""
    naming: NamingOptions = field(default_factory=NamingOptions)
    dialect: SqlDialect = DEFAULT_DIALECT
    empty_placeholder: str = DEFAULT_EMPTY_PLACEHOLDER
    header_row: int = 0

    @classmethod
    def from_config(cls, cfg: ImportConfig) -> ImportSettings:
        return cls(
            naming=NamingOptions(
                max_identifier_length=cfg.max_identifier_length,
                max_suffix=cfg.max_suffix,
            ),
            dialect=SqlDialect(
                string_length_margin=cfg.string_length_margin,
                empty_column_type=cfg.empty_column_type,
            ),
            empty_placeholder=cfg.empty_placeholder,
            header_row=cfg.header_row,
        )


@dataclass(frozen=True)
class ImportPlan:
    """Statements for one table, ready to execute."""
    definition: TableDefinition
    create_sql: str
    insert_sql: str


def scan_excel_files(directory: Path) -> list[Path]:
    """List .xlsx files in `directory` (non-recursive, sorted by name).

    Raises:
        ProcessingError: directory missing, not a directory, or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        # "~$" で始まるファイルは Excel のロックファイル
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix == ".xlsx" and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def plan_import(
    workbook: Mapping[str, SheetData],
    settings: ImportSettings = ImportSettings(),
    paramstyle: str = "qmark",
    taken_table_names: Collection[str] = (),
) -> list[ImportPlan]:
    """Infer table definitions and render statements for every non-empty sheet.

    `taken_table_names` holds tables created earlier in the same run; new
    table names are kept distinct from them.
    """
    dialect = settings.dialect.with_paramstyle(paramstyle)
    return [
        ImportPlan(
            definition=definition,
            create_sql=render_create_table(definition, dialect),
            insert_sql=render_insert(definition, dialect),
        )
        for definition in build_table_definitions(workbook, settings.naming, taken_table_names)
    ]


def import_workbook(
    workbook: Mapping[str, SheetData],
    executor: StatementExecutor,
    settings: ImportSettings = ImportSettings(),
    taken_table_names: Collection[str] = (),
) -> ImportResult:
    """Create one table per non-empty sheet and insert its rows.

    Issues exactly one CREATE TABLE per table and one INSERT per row, in sheet
    order then row order.
    """
    start_time = datetime.now(UTC)
    if not workbook:
        logger.info("workbook has no sheets. No DB modification will be done.")

    plans = plan_import(workbook, settings, executor.paramstyle, taken_table_names)
    skipped_sheets = len(workbook) - len(plans)
    total_rows = sum(len(workbook[p.definition.sheet_name].rows) for p in plans)

    table_stats: list[TableStat] = []
    inserted_total = 0
    with ProgressTracker(total_rows) as progress:
        for plan in plans:
            definition = plan.definition
            sheet = workbook[definition.sheet_name]
            table_start = time.perf_counter()
            progress.start_table(definition.table_name)

            logger.info(f"create table statement: {plan.create_sql}")
            executor.execute_ddl(plan.create_sql)

            logger.info(f"insert data statement: {plan.insert_sql}")
            for row in sheet.rows:
                executor.execute_insert(plan.insert_sql, bind_row(definition, row, settings.empty_placeholder))
                progress.advance()

            progress.finish_table()
            inserted = len(sheet.rows)
            inserted_total += inserted
            logger.info(f"sheet '{definition.sheet_name}' -> {definition.table_name}: {inserted} rows")
            table_stats.append(
                TableStat(
                    sheet_name=definition.sheet_name,
                    table_name=definition.table_name,
                    columns=len(definition),
                    inserted_rows=inserted,
                    elapsed_seconds=time.perf_counter() - table_start,
                )
            )

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    return ImportResult(
        tables_created=len(plans),
        total_inserted_rows=inserted_total,
        skipped_sheets=skipped_sheets,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=inserted_total / elapsed if elapsed > 0 else 0.0,
        table_stats=table_stats,
    )


def import_file(
    path: Path,
    executor: StatementExecutor,
    settings: ImportSettings = ImportSettings(),
    taken_table_names: Collection[str] = (),
) -> ImportResult:
    """Read a workbook file and import it."""
    logger.info(f"reading workbook: {path}")
    workbook = read_workbook(path, header_row=settings.header_row)
    return import_workbook(workbook, executor, settings, taken_table_names)
