from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

"""Statement executors.

The import core only produces statement text and bound parameter lists; an
executor runs them. Driver errors are not wrapped: they propagate unchanged
to the caller.

- CursorExecutor: forwards to a DB-API cursor (psycopg2 in production)
- RecordingExecutor: keeps statements in memory (dry-run mode / tests)
"""

__all__ = [
    "StatementExecutor",
    "CursorExecutor",
    "RecordingExecutor",
]

logger = logging.getLogger(__name__)


class StatementExecutor(Protocol):
    """What the orchestrator needs from an executor."""
    paramstyle: str  # DB-API paramstyle, selects the INSERT placeholder

    def execute_ddl(self, sql: str) -> None: ...

    def execute_insert(self, sql: str, params: Sequence[Any]) -> None: ...


class CursorExecutor:
    """Execute statements on a DB-API cursor.

    psycopg2 uses the `pyformat` paramstyle, so positional `%s` placeholders.
    """

    def __init__(self, cursor: Any, paramstyle: str = "format") -> None:
        self.cursor = cursor
        self.paramstyle = paramstyle

    def execute_ddl(self, sql: str) -> None:
        self.cursor.execute(sql)

    def execute_insert(self, sql: str, params: Sequence[Any]) -> None:
        self.cursor.execute(sql, tuple(params))


class RecordingExecutor:
    """Record statements instead of executing them.

    statements: list of (sql, params) in execution order; params is None for DDL.
    """

    def __init__(self, paramstyle: str = "qmark") -> None:
        self.paramstyle = paramstyle
        self.statements: list[tuple[str, tuple[Any, ...] | None]] = []

    def execute_ddl(self, sql: str) -> None:
        self.statements.append((sql, None))

    def execute_insert(self, sql: str, params: Sequence[Any]) -> None:
        self.statements.append((sql, tuple(params)))

    @property
    def ddl(self) -> list[str]:
        return [sql for sql, params in self.statements if params is None]

    @property
    def inserts(self) -> list[tuple[str, tuple[Any, ...]]]:
        return [(sql, params) for sql, params in self.statements if params is not None]

    def __len__(self) -> int:
        return len(self.statements)
