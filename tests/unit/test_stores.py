from __future__ import annotations
import json
from pathlib import Path

import pandas as pd
import pytest

from sheetdoc.errors import EmptyData
from sheetdoc.models.fill_mode import LinkedFill
from sheetdoc.models.range_spec import ExactRow
from sheetdoc.models.record import FlatRecord, ReplacementInstruction
from sheetdoc.models.table import SheetSelector, Table
from sheetdoc.services.record_merger import RecordMerger
from sheetdoc.stores.base import StoreError
from sheetdoc.stores.excel import ExcelTableStore, _frame_to_table, read_excel_file, write_excel_file
from sheetdoc.stores.json_store import JsonDocumentStore, RecordArchive
from sheetdoc.stores.memory import InMemoryTableStore, RecordingDocumentStore


def test_excel_store_reads_cells_as_strings(temp_workdir: Path, make_workbook):
    make_workbook(
        temp_workdir / "data",
        "people.xlsx",
        {"Persons": [["Name", "ID", "Zip"], ["Ann", "1234567890123", "01234"], [None, None, None], ["Ben", 42]]},
    )
    store = ExcelTableStore(temp_workdir / "data")
    assert store.exists("people", "Persons")
    assert not store.exists("people", "Other")
    assert not store.exists("missing", "Persons")

    table = store.get_rows("people", "Persons")
    assert table.header == ("Name", "ID", "Zip")
    # leading zeros survive; the blank row keeps its position
    assert table.rows[0] == ("Ann", "1234567890123", "01234")
    assert table.rows[1] == ()
    assert table.rows[2][:2] == ("Ben", "42")
    assert table.cell(2, 2) == ""
    assert store.get_metadata("people").title == "people"


def test_blank_rows_keep_sheet_row_numbers(temp_workdir: Path, make_workbook):
    data = temp_workdir / "data"
    make_workbook(data, "inv.xlsx", {"Investors": [["Investor", "Pointer"], ["Ivy", "4"]]})
    make_workbook(data, "biz.xlsx", {"Businesses": [["Business"], ["Alpha"], [None], ["Gamma"]]})
    store = ExcelTableStore(data)
    assert store.get_rows("biz", "Businesses").rows == (("Alpha",), (), ("Gamma",))

    (record,) = RecordMerger(store).merge(
        [SheetSelector("inv", "Investors"), SheetSelector("biz", "Businesses")],
        ExactRow(2),
        LinkedFill("Pointer"),
    )
    assert record["Business"] == "Gamma"


def test_trailing_blank_rows_are_dropped():
    df = pd.DataFrame([["Name", "ID"], ["Ann", "1"], ["", ""], ["Ben", ""], ["", ""], [" ", ""]])
    table = _frame_to_table(df)
    assert table.rows == (("Ann", "1"), (), ("Ben",))


def test_sheet_of_blank_rows_is_empty_data():
    store = InMemoryTableStore()
    store.sheets["blank"] = {"S": _frame_to_table(pd.DataFrame([["Name"], [""], [""]]))}
    with pytest.raises(EmptyData):
        RecordMerger(store).fetch(SheetSelector("blank", "S"))


def test_excel_store_missing_workbook(temp_workdir: Path):
    store = ExcelTableStore(temp_workdir / "data")
    with pytest.raises(StoreError) as e:
        store.get_rows("missing", "Persons")
    assert e.value.status == 404


def test_write_then_read_excel(temp_workdir: Path):
    table = Table.from_values([["A", "B"], ["1", "2"], ["3"]])
    path = write_excel_file(temp_workdir / "out" / "t.xlsx", table, sheet_name="S")
    tables = read_excel_file(path)
    assert tables["S"].rows == (("1", "2"), ("3",))


def test_in_memory_store_metadata():
    store = InMemoryTableStore(titles={"a": "Title A"})
    store.add_sheet("a", "S", [["x"], ["1"]])
    assert store.get_metadata("a").title == "Title A"
    with pytest.raises(StoreError):
        store.get_metadata("b")


def test_recording_document_store_render():
    store = RecordingDocumentStore()
    store.apply_replacements("doc", [ReplacementInstruction("${{Name}}", "Ann")])
    assert store.applied[0][0] == "doc"
    assert store.render("Dear ${{Name}}, ${{Name}}") == "Dear Ann, Ann"


def test_json_document_store_writes_batch_update_body(temp_workdir: Path):
    store = JsonDocumentStore(temp_workdir / "out")
    store.apply_replacements("doc-1", [ReplacementInstruction("${{Name}}", "แอน")])
    store.apply_replacements("doc-1", [])
    assert [p.name for p in store.written] == ["doc-1-1.json", "doc-1-2.json"]
    body = json.loads(store.written[0].read_text(encoding="utf-8"))
    assert body["documentId"] == "doc-1"
    assert body["requests"][0]["replaceAllText"]["replaceText"] == "แอน"


def test_record_archive_round_trip(temp_workdir: Path):
    archive = RecordArchive(temp_workdir / "records")
    record = FlatRecord(["Name"])
    record["Name"] = "Ann"
    record.add_field("plan", ["a", "b"])
    archive.save("C2_Acme_Ann", record)
    assert archive.load("C2_Acme_Ann").to_dict() == {"Name": "Ann", "plan": ["a", "b"]}


def test_record_archive_errors(temp_workdir: Path):
    archive = RecordArchive(temp_workdir / "records")
    with pytest.raises(StoreError) as e:
        archive.save("", FlatRecord([]))
    assert e.value.status == 400
    with pytest.raises(StoreError) as e:
        archive.load("missing")
    assert e.value.status == 404
