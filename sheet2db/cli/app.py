from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config
from ..db.connection import db_connection
from ..db.executor import CursorExecutor, RecordingExecutor, StatementExecutor
from ..errors import InvariantViolation, Sheet2DbError
from ..excel.reader import read_workbook
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..logging.init import log_summary, set_level, setup_logging
from ..models.import_result import ImportResult
from ..services.orchestrator import ImportSettings, ProcessingError, import_file, plan_import, scan_excel_files
from ..services.summary import render_summary_body

"""CLI entrypoint.

Flow:
- Load .env (overrides process env, DB settings first) and config/import.yml
- Collect workbooks: explicit arguments, else *.xlsx in source_directory
- Import each workbook (one import run each) through a single DB connection;
  the first failure stops everything and the connection is rolled back.
  Table names are unique across all workbooks of the run
- Log a SUMMARY line

Exit codes:
    0 success
    1 fatal (config, missing files/directory, database / unexpected errors)
    2 workbook data error (type conflict, name generation, workbook structure)
    3 internal invariant violation (importer defect)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_DATA_ERROR = 2
EXIT_INVARIANT = 3

DEFAULT_CONFIG_PATH = Path("config/import.yml")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; its values win over existing env vars."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheet2db", description="Excel workbook -> database table importer")
    p.add_argument("workbooks", nargs="*", help="Workbook files (default: *.xlsx in source_directory)")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Config file path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--dry-run", action="store_true", help="Log statements without connecting to the database")
    p.add_argument("--inspect-data", action="store_true", help="Print inferred table definitions then exit")
    return p.parse_args(argv)


def _collect_workbooks(args: argparse.Namespace, source_directory: str) -> list[Path]:
    if args.workbooks:
        paths = [Path(p) for p in args.workbooks]
        missing = [str(p) for p in paths if not p.is_file()]
        if missing:
            raise ProcessingError(f"workbook not found: {', '.join(missing)}")
        return paths
    return scan_excel_files(Path(source_directory))


def _inspect_data(files: list[Path], settings: ImportSettings) -> int:
    tables: set[str] = set()
    for f in files:
        print(f"FILE: {f.name}")
        workbook = read_workbook(f, header_row=settings.header_row)
        for plan in plan_import(workbook, settings, taken_table_names=tables):
            d = plan.definition
            tables.add(d.table_name)
            rows = len(workbook[d.sheet_name].rows)
            print(f"  SHEET: {d.sheet_name} -> {d.table_name} rows={rows}")
            for c in d.columns:
                print(f"    {c.display_name!r} -> {c.db_name} {c.type.name}")
            print(f"    {plan.create_sql}")
    return EXIT_SUCCESS


def _import_all(
    files: list[Path],
    executor: StatementExecutor,
    settings: ImportSettings,
    results: list[ImportResult],
    error_log: ErrorLogBuffer,
) -> None:
    # table names stay unique across every workbook of the run
    tables: set[str] = set()
    for f in files:
        try:
            result = import_file(f, executor, settings, taken_table_names=tables)
        except Exception as e:
            error_log.append(ErrorRecord.from_exception(f.name, e))
            raise
        results.append(result)
        tables.update(s.table_name for s in result.table_stats)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_level(logging.DEBUG)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(Path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    settings = ImportSettings.from_config(cfg)

    try:
        files = _collect_workbooks(args, cfg.source_directory)
    except ProcessingError as e:
        logger.error(str(e))
        return EXIT_FATAL
    logger.info(f"workbooks: {len(files)}")

    if args.inspect_data:
        try:
            return _inspect_data(files, settings)
        except Sheet2DbError as e:
            logger.error(f"inspect: {e}")
            return EXIT_DATA_ERROR

    # テスト等で DB 接続を完全に無効化したい場合 DISABLE_DB_CONNECT=1
    dry_run = args.dry_run or os.getenv("DISABLE_DB_CONNECT") == "1"
    error_log = ErrorLogBuffer()
    results: list[ImportResult] = []
    start_time = datetime.now(UTC)
    code = EXIT_SUCCESS
    try:
        if dry_run:
            logger.info("dry run: statements are not sent to the database")
            _import_all(files, RecordingExecutor(), settings, results, error_log)
        else:
            with db_connection(cfg.database) as cur:
                _import_all(files, CursorExecutor(cur), settings, results, error_log)
    except Sheet2DbError as e:
        logger.error(f"import: {e}")
        code = EXIT_DATA_ERROR
    except InvariantViolation as e:
        logger.error(f"internal error (please report): {e}")
        code = EXIT_INVARIANT
    except Exception as e:
        logger.error(f"import aborted: {type(e).__name__}: {e}")
        code = EXIT_FATAL

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    summary = ImportResult.combine(results, start_time, datetime.now(UTC))
    log_summary(render_summary_body(summary))
    return code
