"""Schema inference: identifier normalization, column typing, table definitions."""

from .builder import NamingOptions, build_table_definition, build_table_definitions
from .inference import max_string_length, unify_column_type
from .naming import is_legal_identifier, normalize_unique, simplify_name

__all__ = [
    "NamingOptions",
    "build_table_definition",
    "build_table_definitions",
    "max_string_length",
    "unify_column_type",
    "is_legal_identifier",
    "normalize_unique",
    "simplify_name",
]
