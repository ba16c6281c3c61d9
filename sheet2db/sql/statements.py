from __future__ import annotations

from dataclasses import dataclass, replace

from ..errors import InvariantViolation
from ..models.table_definition import ColumnDefinition, ColumnType, TableDefinition

"""DDL / DML text generation from a TableDefinition.

Pure functions: no I/O, deterministic output. Identifiers are emitted
unquoted; the name normalizer guarantees they are legal as-is.

Column order in INSERT equals TableDefinition column order. The orchestrator
binds parameters by the same positional index.
"""

__all__ = [
    "SqlDialect",
    "DEFAULT_DIALECT",
    "PLACEHOLDERS",
    "sql_type",
    "render_create_table",
    "render_insert",
]

# DB-API paramstyle -> positional placeholder
PLACEHOLDERS: dict[str, str] = {
    "qmark": "?",
    "format": "%s",
    "pyformat": "%s",
}


@dataclass(frozen=True)
class SqlDialect:
    """Type names and placeholder used when rendering statements."""
    # source/target encoding differences can slightly expand the effective length
    string_length_margin: int = 3
    empty_column_type: str = "VARCHAR(10)"  # nothing to size it from
    number_type: str = "DOUBLE PRECISION"
    date_type: str = "TIMESTAMP WITH TIME ZONE"
    boolean_type: str = "BOOLEAN"
    placeholder: str = "?"

    def with_paramstyle(self, paramstyle: str) -> SqlDialect:
        """Same dialect with the placeholder of a DB-API paramstyle."""
        if paramstyle not in PLACEHOLDERS:
            raise ValueError(f"unsupported paramstyle: {paramstyle}")
        return replace(self, placeholder=PLACEHOLDERS[paramstyle])


DEFAULT_DIALECT = SqlDialect()


def sql_type(column: ColumnDefinition, dialect: SqlDialect = DEFAULT_DIALECT) -> str:
    """SQL column type for one column definition."""
    col_type = column.type
    if col_type is ColumnType.BOOLEAN:
        return dialect.boolean_type
    if col_type is ColumnType.DATE:
        return dialect.date_type
    if col_type is ColumnType.NUMBER:
        return dialect.number_type
    if col_type is ColumnType.EMPTY:
        return dialect.empty_column_type
    if col_type is ColumnType.STRING:
        if column.max_string_length is None:
            raise InvariantViolation(f"column '{column.display_name}': STRING column without a length")
        return f"VARCHAR({column.max_string_length + dialect.string_length_margin})"
    raise InvariantViolation(f"column '{column.display_name}': unknown column type {col_type!r}")


def render_create_table(definition: TableDefinition, dialect: SqlDialect = DEFAULT_DIALECT) -> str:
    """`CREATE TABLE <table> (<col> <type>, ...)`"""
    cols = ", ".join(f"{c.db_name} {sql_type(c, dialect)}" for c in definition.columns)
    return f"CREATE TABLE {definition.table_name} ({cols})"


def render_insert(definition: TableDefinition, dialect: SqlDialect = DEFAULT_DIALECT) -> str:
    """`INSERT INTO <table> (<col>, ...) VALUES (?, ...)` with one placeholder per column."""
    cols = ", ".join(definition.db_column_names)
    placeholders = ", ".join(dialect.placeholder for _ in definition.columns)
    return f"INSERT INTO {definition.table_name} ({cols}) VALUES ({placeholders})"
