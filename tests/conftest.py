# Shared pytest fixtures
from __future__ import annotations
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from sheet2db.logging.init import reset_logging
from sheet2db.models.sheet_data import SheetData

from .helpers import make_sheet


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
header_row: 0
empty_placeholder: ""
naming:
  max_identifier_length: 63
  max_suffix: 999
sql:
  string_length_margin: 3
  empty_column_type: VARCHAR(10)
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _clean_logging():
    # each test gets a logger bound to the current (possibly captured) stdout
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def orders_sheet() -> SheetData:
    return make_sheet(
        "Orders",
        ["ID", "Amount", "Paid"],
        [[1, 12.5, True], [2, 0.0, False]],
    )


@pytest.fixture()
def sample_datetime() -> datetime:
    return datetime(2024, 3, 15, 10, 30)
