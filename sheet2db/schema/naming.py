from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Collection, Sequence

from ..errors import NameGenerationError

"""Name normalizer: display names -> unique, legal SQL identifiers.

Legal form: lower-case ASCII letters, digits and underscores, not starting
with a digit, not a reserved word, at most `max_length` characters
(PostgreSQL truncates identifiers beyond 63 bytes).

Uniqueness: names are processed in input order; the first occurrence keeps its
simplified form and later collisions get the smallest free numeric suffix
(`name_2`, `name_3`, ...). The output for position i depends only on inputs
0..i, so the mapping is deterministic.
"""

__all__ = [
    "DEFAULT_MAX_LENGTH",
    "DEFAULT_MAX_SUFFIX",
    "RESERVED_WORDS",
    "is_legal_identifier",
    "simplify_name",
    "normalize_unique",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 63
DEFAULT_MAX_SUFFIX = 999

_LEGAL_RE = re.compile(r"^[a-z_][a-z0-9_]*$")
_ILLEGAL_RUN_RE = re.compile(r"[^a-z0-9_]+")

# Words that cannot be used as unquoted identifiers (SQL standard / PostgreSQL reserved)
RESERVED_WORDS = frozenset({
    "all", "analyse", "analyze", "and", "any", "array", "as", "asc", "asymmetric",
    "authorization", "both", "case", "cast", "check", "collate", "column",
    "constraint", "create", "current_catalog", "current_date", "current_role",
    "current_time", "current_timestamp", "current_user", "default", "deferrable",
    "desc", "distinct", "do", "else", "end", "except", "false", "fetch", "for",
    "foreign", "from", "grant", "group", "having", "in", "initially", "intersect",
    "into", "is", "join", "lateral", "leading", "left", "like", "limit", "localtime",
    "localtimestamp", "not", "null", "offset", "on", "only", "or", "order", "outer",
    "placing", "primary", "references", "returning", "right", "select",
    "session_user", "some", "symmetric", "table", "then", "to", "trailing", "true",
    "union", "unique", "user", "using", "values", "variadic", "when", "where",
    "window", "with",
    # reserved, but usable as function or type names
    "binary", "collation", "concurrently", "cross", "current_schema", "freeze", "full",
    "ilike", "inner", "isnull", "natural", "notnull", "overlaps", "similar",
    "system_user", "tablesample", "verbose",
})


def is_legal_identifier(name: str, max_length: int = DEFAULT_MAX_LENGTH) -> bool:
    """Check that `name` can be used unquoted as a table/column identifier."""
    return (
        0 < len(name) <= max_length
        and _LEGAL_RE.match(name) is not None
        and name not in RESERVED_WORDS
    )


def simplify_name(name: str, *, fallback: str = "col", max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Legalize one display name (no uniqueness handling).

    "Order Date" -> "order_date", "2024 Sales" -> "_2024_sales", "Select" -> "select_",
    "" / "***" -> fallback.
    """
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    simplified = _ILLEGAL_RUN_RE.sub("_", ascii_name.lower()).strip("_")
    if not simplified:
        simplified = fallback
    if simplified[0].isdigit():
        simplified = "_" + simplified
    simplified = simplified[:max_length]
    if simplified in RESERVED_WORDS:
        simplified = simplified[: max_length - 1] + "_"
    return simplified


def _with_suffix(base: str, n: int, max_length: int) -> str:
    suffix = f"_{n}"
    return base[: max_length - len(suffix)] + suffix


def normalize_unique(
    names: Sequence[str],
    *,
    fallback: str = "col",
    max_length: int = DEFAULT_MAX_LENGTH,
    max_suffix: int = DEFAULT_MAX_SUFFIX,
    taken: Collection[str] = (),
) -> list[str]:
    """Normalize `names` into pairwise-unique legal identifiers (same order, same length).

    Names in `taken` (e.g. tables created earlier in the same run) count as
    already used, so no output equals one of them.

    Raises:
        NameGenerationError: no free suffix up to `max_suffix`, or the result
            is not a legal identifier (e.g. illegal fallback / max_length too small)
    """
    preset = set(taken)
    used: set[str] = set(preset)
    result: list[str] = []
    for name in names:
        base = simplify_name(name, fallback=fallback, max_length=max_length)
        candidate = base
        n = 2
        while candidate in used:
            if n > max_suffix:
                raise NameGenerationError(
                    [name], f"all suffixes up to {max_suffix} for '{base}' are taken"
                )
            candidate = _with_suffix(base, n, max_length)
            n += 1
        if not is_legal_identifier(candidate, max_length):
            raise NameGenerationError([name], f"'{candidate}' is not a legal identifier")
        if candidate != base:
            logger.debug(f"name collision: '{name}' -> '{candidate}'")
        used.add(candidate)
        result.append(candidate)

    if len(result) != len(names) or len(set(result)) != len(result) or preset & set(result):
        # unreachable with the loop above; guards against silent merging
        raise NameGenerationError(list(names), "generated names are not unique")
    return result
