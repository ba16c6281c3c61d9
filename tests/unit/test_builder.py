from __future__ import annotations

import pytest

from sheet2db.errors import InvariantViolation, NameGenerationError, SchemaInferenceError
from sheet2db.models.sheet_data import SheetData
from sheet2db.models.table_definition import ColumnType
from sheet2db.models.tagged_value import TaggedValue
from sheet2db.schema.builder import NamingOptions, build_table_definition, build_table_definitions

from ..helpers import make_sheet


def test_orders_definition(orders_sheet: SheetData):
    (defn,) = build_table_definitions({"Orders": orders_sheet})
    assert defn.table_name == "orders"
    assert defn.sheet_name == "Orders"
    assert [(c.db_name, c.type) for c in defn.columns] == [
        ("id", ColumnType.NUMBER),
        ("amount", ColumnType.NUMBER),
        ("paid", ColumnType.BOOLEAN),
    ]
    assert all(c.max_string_length is None for c in defn.columns)


def test_string_length_measured_per_column():
    sheet = make_sheet(
        "S",
        ["Short", "Long"],
        [["abc", "x" * 20], ["abcdefg", "y"], ["ab", None]],
    )
    defn = build_table_definition(sheet, "s")
    assert defn.columns[0].max_string_length == 7
    assert defn.columns[1].max_string_length == 20


def test_empty_cell_in_string_column_is_wildcard():
    sheet = make_sheet("Notes", ["Notes"], [["hello"], [None]])
    defn = build_table_definition(sheet, "notes")
    col = defn.columns[0]
    assert col.type is ColumnType.STRING
    assert col.max_string_length == 5


def test_all_empty_column_is_empty_type():
    sheet = make_sheet("S", ["A", "Blank"], [[1, None], [2, None]])
    defn = build_table_definition(sheet, "s")
    assert defn.columns[1].type is ColumnType.EMPTY
    assert defn.columns[1].max_string_length is None


def test_column_order_follows_header():
    sheet = make_sheet("S", ["Zeta", "Alpha", "Mid"], [[1, "a", True]])
    defn = build_table_definition(sheet, "s")
    assert defn.db_column_names == ["zeta", "alpha", "mid"]


def test_colliding_column_names_are_disambiguated():
    sheet = make_sheet("S", ["Qty", "QTY", "qty "], [[1, 2, 3]])
    defn = build_table_definition(sheet, "s")
    assert defn.db_column_names == ["qty", "qty_2", "qty_3"]
    assert defn.column_names == ["Qty", "QTY", "qty "]


def test_type_conflict_names_sheet_and_column():
    sheet = make_sheet("Products", ["Name", "Code"], [["a", "X1"], ["b", 17]])
    with pytest.raises(SchemaInferenceError) as e:
        build_table_definition(sheet, "products")
    assert e.value.sheet_name == "Products"
    assert e.value.column_name == "Code"


def test_empty_sheets_skipped_and_table_names_unique():
    workbook = {
        "Data": make_sheet("Data", ["A"], [[1]]),
        "Nothing": SheetData("Nothing", ["A"], []),
        "DATA": make_sheet("DATA", ["A"], [["x"]]),
    }
    defs = build_table_definitions(workbook)
    assert [d.table_name for d in defs] == ["data", "data_2"]
    assert [d.sheet_name for d in defs] == ["Data", "DATA"]


def test_table_names_resolved_across_whole_workbook():
    # the empty sheet still takes part in naming, so later names do not shift
    workbook = {
        "Sales": SheetData("Sales", [], []),
        "sales": make_sheet("sales", ["A"], [[1]]),
    }
    (defn,) = build_table_definitions(workbook)
    assert defn.table_name == "sales_2"


def test_no_sheets():
    assert build_table_definitions({}) == []


def test_row_shape_mismatch_is_invariant_violation():
    sheet = SheetData("S", ["A", "B"], [{"A": TaggedValue.number(1)}])
    with pytest.raises(InvariantViolation):
        build_table_definition(sheet, "s")


def test_empty_sheet_cannot_be_built_directly():
    with pytest.raises(InvariantViolation):
        build_table_definition(SheetData("S", ["A"], []), "s")


def test_naming_options_applied():
    sheet = make_sheet("S", ["a", "A"], [[1, 2]])
    with pytest.raises(NameGenerationError):
        build_table_definition(sheet, "s", NamingOptions(max_suffix=1))
