# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from sheetdoc.logging.init import reset_logging
from sheetdoc.stores.memory import InMemoryTableStore, RecordingDocumentStore


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./out
document_id: doc-001
sheets:
  - sheet_id: people
    sheet_name: Persons
    column_format: ID
  - sheet_id: loans
    sheet_name: Loans
range:
  from_row: 0
  to_row: 0
placeholder_style: dollar
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "export.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_excel(directory: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
    p = directory / name
    with pd.ExcelWriter(p) as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return p


PERSONS = [
    ["Name", "ID"],
    ["Ann", "1234567890123"],
    ["Ben", "1102345678905"],
]

LOANS = [
    ["Amount", "Branch"],
    ["1,000", "North"],
    ["2,500", "South"],
]


@pytest.fixture()
def excel_sources(temp_workdir: Path) -> Path:
    data = temp_workdir / "data"
    make_excel(data, "people.xlsx", {"Persons": PERSONS})
    make_excel(data, "loans.xlsx", {"Loans": LOANS})
    return data


@pytest.fixture()
def table_store() -> InMemoryTableStore:
    store = InMemoryTableStore(titles={"people": "People Registry"})
    store.add_sheet("people", "Persons", PERSONS)
    store.add_sheet("loans", "Loans", LOANS)
    return store


@pytest.fixture()
def document_store() -> RecordingDocumentStore:
    return RecordingDocumentStore()


@pytest.fixture()
def make_workbook():
    return make_excel
