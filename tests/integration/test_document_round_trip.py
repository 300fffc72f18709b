from __future__ import annotations

from sheetdoc.models.table import SheetSelector
from sheetdoc.services.export_pipeline import ExportRequest, export_documents, run_operation
from sheetdoc.stores.memory import InMemoryTableStore, RecordingDocumentStore

TEMPLATE = "Borrower ${{Name}} (${{ID}}) owes ${{Amount}} at ${{Branch}} branch."


def test_round_trip_each_placeholder_replaced_once_per_key(table_store, document_store):
    selectors = (SheetSelector("people", "Persons", column_format="ID"), SheetSelector("loans", "Loans"))
    result = run_operation("export", lambda: export_documents(ExportRequest("tmpl", selectors), table_store, document_store))
    assert result.ok

    for _, instructions in document_store.applied:
        placeholders = [i.placeholder for i in instructions]
        assert len(placeholders) == len(set(placeholders)) == 4

    assert document_store.render(TEMPLATE, 0) == "Borrower Ann (x-xxxx-xxxx0-12-x) owes 1,000 at North branch."
    assert document_store.render(TEMPLATE, 1) == "Borrower Ben (x-xxxx-xxxx8-90-x) owes 2,500 at South branch."


def test_instructions_apply_in_record_key_order():
    store = InMemoryTableStore()
    store.add_sheet("s", "S", [["A", "B"], ["${{B}}", "b"]])
    documents = RecordingDocumentStore()
    export_documents(ExportRequest("tmpl", (SheetSelector("s", "S"),)), store, documents)
    # A inserts a B placeholder verbatim; the later B instruction then replaces it
    assert documents.render("${{A}}|${{B}}") == "b|b"
    assert [i.value for i in documents.applied[0][1]] == ["${{B}}", "b"]
