"""SQL statement rendering."""

from .statements import DEFAULT_DIALECT, SqlDialect, render_create_table, render_insert, sql_type

__all__ = [
    "DEFAULT_DIALECT",
    "SqlDialect",
    "render_create_table",
    "render_insert",
    "sql_type",
]
