from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""JSON Lines error log for CLI runs.

Records are buffered in memory and written by flush() to
`logs/errors-YYYYMMDD-HHMMSS.log` (UTC, one file per buffer). The file is
created on the first flush that has something to write, so successful runs
leave no log behind.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
FILE_STAMP = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Pending ErrorRecords plus the log file they end up in."""

    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self.logs_dir = logs_dir
        self._pending: list[ErrorRecord] = []
        self._path: Path | None = None

    @property
    def file_path(self) -> Path:
        # fixed at first use so repeated flushes append to one file
        if self._path is None:
            self._path = self.logs_dir / f"errors-{datetime.now(UTC):{FILE_STAMP}}.log"
        return self._path

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[ErrorRecord]:
        return iter(self._pending)

    def flush(self) -> Path | None:
        """Append pending records to the log file and return its path (None if nothing pending)."""
        if not self._pending:
            return None
        target = self.file_path
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as out:
            out.writelines(f"{rec.to_json_line()}\n" for rec in self._pending)
        self._pending = []
        return target
