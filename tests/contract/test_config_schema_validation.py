from __future__ import annotations

import json

import jsonschema
import pytest

from sheetdoc.config.loader import SCHEMA_PATH

"""Config JSON schema contract tests."""

VALID = {
    "source_directory": "./data",
    "document_id": "doc",
    "sheets": [{"sheet_id": "a", "sheet_name": "A", "columns_name": ["x", "y"]}],
    "range": {"from_row": "2", "to_row": 5, "exact": False},
    "fill": {"mode": "linked", "row_pointer_field": "ptr"},
    "placeholder_style": "angle",
    "contract_type": "C4",
    "installment": {"buddhist_year_offset": 543},
    "name_fields": {"business": "b", "investor": "i"},
    "fetch_workers": 2,
}


@pytest.fixture()
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_full_config_is_valid(schema):
    jsonschema.validate(VALID, schema)


@pytest.mark.parametrize("missing", ["source_directory", "document_id", "sheets"])
def test_required_keys(schema, missing):
    data = {k: v for k, v in VALID.items() if k != missing}
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(data, schema)


def test_sheet_requires_id_and_name(schema):
    data = dict(VALID, sheets=[{"sheet_id": "a"}])
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(data, schema)


def test_empty_sheet_list_rejected(schema):
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(dict(VALID, sheets=[]), schema)
