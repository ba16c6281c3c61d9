from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress bar for a workbook import (tqdm, TTY only).

The bar counts inserted rows across all tables of one workbook; its label
names the table being filled. When stdout is not a terminal (CI, pipes,
redirected logs) no bar is created and every method is a no-op.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Counts rows for one import run. Usable as a context manager."""

    def __init__(self, total_rows: int, *, description: str = "Importing rows") -> None:
        self.total_rows = total_rows
        self.description = description
        self.current_table: str | None = None
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = self._open_bar() if self.enabled else None

    def _open_bar(self) -> TqdmType[Any]:
        return tqdm(
            total=self.total_rows,
            desc=self.description,
            unit="row",
            leave=True,
            position=0,
            ncols=80,
            ascii=True,
        )

    def _label(self, text: str) -> None:
        if self.pbar is not None:
            self.pbar.set_description(text)

    def start_table(self, table_name: str) -> None:
        self.current_table = table_name
        self._label(f"{self.description} ({table_name})")

    def advance(self, rows: int = 1) -> None:
        if self.pbar is not None:
            self.pbar.update(rows)

    def finish_table(self) -> None:
        self.current_table = None
        self._label(self.description)

    def close(self) -> None:
        bar, self.pbar = self.pbar, None
        if bar is not None:
            bar.close()

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
