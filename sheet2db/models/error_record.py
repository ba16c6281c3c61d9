from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""One line of the JSON Lines error log.

A run stops at its first error, so a failed run writes a single record.
Fields that do not apply (column for a header error, sheet for a missing
file) are empty strings, never null.
"""

__all__ = [
    "ErrorRecord",
]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record.

    Attributes:
        timestamp: UTC time in ISO 8601 with a 'Z' suffix
        file: workbook file name
        sheet: sheet name or ""
        column: column display name or ""
        error_type: exception class name in UPPER_SNAKE_CASE
        message: human readable description
    """
    timestamp: str
    file: str
    sheet: str
    column: str
    error_type: str
    message: str

    @classmethod
    def create(cls, file: str, sheet: str, column: str, error_type: str, message: str) -> ErrorRecord:
        return cls(_utc_now_iso(), file, sheet, column, error_type, message)

    @classmethod
    def from_exception(cls, file: str, exc: BaseException) -> ErrorRecord:
        """Record for an import failure; sheet/column come from the exception when it carries them."""
        return cls.create(
            file=file,
            sheet=str(getattr(exc, "sheet_name", None) or ""),
            column=str(getattr(exc, "column_name", None) or ""),
            error_type=_CAMEL_BOUNDARY.sub("_", type(exc).__name__).upper(),
            message=str(exc),
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
