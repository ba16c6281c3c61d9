from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from sheet2db.config.loader import load_config
from sheet2db.db.executor import CursorExecutor, RecordingExecutor
from sheet2db.errors import SchemaInferenceError
from sheet2db.models.import_result import ImportResult
from sheet2db.models.sheet_data import SheetData
from sheet2db.services.orchestrator import (
    ImportSettings,
    ProcessingError,
    import_workbook,
    plan_import,
    scan_excel_files,
)

from ..helpers import make_sheet


def test_orders_end_to_end(orders_sheet: SheetData):
    ex = RecordingExecutor()
    result = import_workbook({"Orders": orders_sheet}, ex)

    insert = "INSERT INTO orders (id, amount, paid) VALUES (?, ?, ?)"
    assert ex.statements == [
        ("CREATE TABLE orders (id DOUBLE PRECISION, amount DOUBLE PRECISION, paid BOOLEAN)", None),
        (insert, (1.0, 12.5, True)),
        (insert, (2.0, 0.0, False)),
    ]
    assert isinstance(result, ImportResult)
    assert result.tables_created == 1
    assert result.total_inserted_rows == 2
    assert result.skipped_sheets == 0
    assert result.table_stats[0].table_name == "orders"
    assert result.table_stats[0].inserted_rows == 2


def test_absent_note_binds_empty_string():
    sheet = make_sheet("Notes", ["Notes"], [["hello"], [None]])
    ex = RecordingExecutor()
    import_workbook({"Notes": sheet}, ex)
    assert ex.ddl == ["CREATE TABLE notes (notes VARCHAR(8))"]
    assert [p for _, p in ex.inserts] == [("hello",), ("",)]


def test_type_conflict_issues_no_statements():
    good = make_sheet("Customers", ["Name"], [["a"]])
    bad = make_sheet("Products", ["Code"], [["X1"], [42]])
    ex = RecordingExecutor()
    with pytest.raises(SchemaInferenceError) as e:
        import_workbook({"Customers": good, "Products": bad}, ex)
    assert e.value.sheet_name == "Products"
    assert e.value.column_name == "Code"
    assert ex.statements == []


def test_empty_sheet_produces_nothing():
    ex = RecordingExecutor()
    result = import_workbook({"Blank": SheetData("Blank", ["A"], [])}, ex)
    assert ex.statements == []
    assert result.tables_created == 0
    assert result.skipped_sheets == 1


def test_empty_workbook():
    ex = RecordingExecutor()
    result = import_workbook({}, ex)
    assert len(ex) == 0
    assert result.total_inserted_rows == 0
    assert result.throughput_rows_per_sec >= 0.0


def test_sheet_then_row_order():
    wb = {
        "B": make_sheet("B", ["X"], [[1], [2]]),
        "A": make_sheet("A", ["Y"], [["p"], ["q"]]),
    }
    ex = RecordingExecutor()
    import_workbook(wb, ex)
    tables = [sql.split()[2] for sql, _ in ex.statements]
    assert tables == ["b", "b", "b", "a", "a", "a"]
    assert [p for _, p in ex.inserts] == [(1.0,), (2.0,), ("p",), ("q",)]


def test_executor_failure_propagates_unchanged(orders_sheet: SheetData):
    class Boom(Exception):
        pass

    cursor = MagicMock()
    cursor.execute.side_effect = [None, Boom("duplicate key")]
    with pytest.raises(Boom):
        import_workbook({"Orders": orders_sheet}, CursorExecutor(cursor))
    # CREATE TABLE + first INSERT only; the second row is never attempted
    assert cursor.execute.call_count == 2


def test_cursor_executor_uses_format_placeholders(orders_sheet: SheetData):
    cursor = MagicMock()
    import_workbook({"Orders": orders_sheet}, CursorExecutor(cursor))
    calls = cursor.execute.call_args_list
    assert calls[0].args == ("CREATE TABLE orders (id DOUBLE PRECISION, amount DOUBLE PRECISION, paid BOOLEAN)",)
    assert calls[1].args == ("INSERT INTO orders (id, amount, paid) VALUES (%s, %s, %s)", (1.0, 12.5, True))


def test_plan_import_renders_statements(orders_sheet: SheetData):
    (plan,) = plan_import({"Orders": orders_sheet})
    assert plan.definition.table_name == "orders"
    assert plan.create_sql.startswith("CREATE TABLE orders")
    assert plan.insert_sql.count("?") == 3


def test_settings_from_config(write_config: Path):
    text = write_config.read_text(encoding="utf-8")
    text = text.replace("string_length_margin: 3", "string_length_margin: 5").replace(
        'empty_placeholder: ""', "empty_placeholder: '-'"
    )
    write_config.write_text(text, encoding="utf-8")
    settings = ImportSettings.from_config(load_config(write_config))
    assert settings.dialect.string_length_margin == 5
    assert settings.empty_placeholder == "-"

    sheet = make_sheet("S", ["Note", "Blank"], [["abc", None], [None, None]])
    ex = RecordingExecutor()
    import_workbook({"S": sheet}, ex, settings)
    assert ex.ddl == ["CREATE TABLE s (note VARCHAR(8), blank VARCHAR(10))"]
    assert [p for _, p in ex.inserts] == [("abc", "-"), ("-", "-")]


def test_scan_excel_files(temp_workdir: Path):
    data_dir = temp_workdir / "data"
    (data_dir / "b.xlsx").write_bytes(b"x")
    (data_dir / "a.xlsx").write_bytes(b"x")
    (data_dir / "~$a.xlsx").write_bytes(b"lock")
    (data_dir / "readme.txt").write_text("ignore")
    (data_dir / "old.xls").write_bytes(b"ignore")
    assert [p.name for p in scan_excel_files(data_dir)] == ["a.xlsx", "b.xlsx"]


def test_scan_excel_files_missing_directory():
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_excel_files(Path("/non/existent/path"))


def test_scan_excel_files_not_a_directory(temp_workdir: Path):
    f = temp_workdir / "file.txt"
    f.write_text("x")
    with pytest.raises(ProcessingError, match="not a directory"):
        scan_excel_files(f)


def test_taken_table_names_are_not_reused(orders_sheet: SheetData):
    ex = RecordingExecutor()
    result = import_workbook({"Orders": orders_sheet}, ex, taken_table_names={"orders"})
    assert ex.ddl[0].startswith("CREATE TABLE orders_2 ")
    assert result.table_stats[0].table_name == "orders_2"
