from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.fill_mode import DEFAULT_ROW_POINTER_FIELD, DirectFill, FillMode, LinkedFill
from ..models.table import SheetSelector
from ..services.export_pipeline import NameFields
from ..services.installment import InstallmentFields
from ..services.template_request import PlaceholderStyle

"""Config loader.

Responsibilities:
- Load YAML config/export.yml
- Validate against sheetdoc/config/schemas/config_schema.json
- Apply defaults (output_directory=./out, all rows, direct fill, ``${{key}}``)
- Build the domain objects the pipeline consumes
"""

SCHEMA_PATH = Path(__file__).parent / "schemas" / "config_schema.json"

DEFAULT_OUTPUT_DIRECTORY = "./out"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class RangeConfig:
    from_row: object = 0
    to_row: object = 0
    exact: bool = False


@dataclass(frozen=True)
class ExportConfig:
    source_directory: str
    document_id: str
    sheets: tuple[SheetSelector, ...]
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    range: RangeConfig = field(default_factory=RangeConfig)
    fill_mode: FillMode = field(default_factory=DirectFill)
    placeholder_style: PlaceholderStyle = PlaceholderStyle.DOLLAR
    contract_type: str | None = None
    installment: InstallmentFields | None = None
    name_fields: NameFields = field(default_factory=NameFields)
    fetch_workers: int = 1

    @property
    def row_pointer_field(self) -> str:
        if isinstance(self.fill_mode, LinkedFill):
            return self.fill_mode.row_pointer_field
        return DEFAULT_ROW_POINTER_FIELD


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or invalid, or the config data
            fails validation (missing required keys, wrong types, unknown keys)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _installment_fields(raw: dict[str, Any] | None) -> InstallmentFields | None:
    if raw is None:
        return None
    defaults = InstallmentFields()
    return InstallmentFields(
        start_date=raw.get("start_date_field", defaults.start_date),
        month_count=raw.get("month_count_field", defaults.month_count),
        payment_day=raw.get("payment_day_field", defaults.payment_day),
        amount=raw.get("amount_field", defaults.amount),
        derived_field=raw.get("derived_field", defaults.derived_field),
        year_offset=raw.get("buddhist_year_offset", defaults.year_offset),
    )


def _fill_mode(raw: dict[str, Any]) -> FillMode:
    if raw.get("mode", "direct") == "linked":
        return LinkedFill(row_pointer_field=raw.get("row_pointer_field", DEFAULT_ROW_POINTER_FIELD))
    return DirectFill()


def load_config(path: Path) -> ExportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    range_raw = data.get("range", {})
    names_raw = data.get("name_fields", {})
    name_defaults = NameFields()
    return ExportConfig(
        source_directory=data["source_directory"],
        document_id=data["document_id"],
        sheets=tuple(SheetSelector.from_dict(s) for s in data["sheets"]),
        output_directory=data.get("output_directory", DEFAULT_OUTPUT_DIRECTORY),
        range=RangeConfig(
            from_row=range_raw.get("from_row", 0),
            to_row=range_raw.get("to_row", 0),
            exact=range_raw.get("exact", False),
        ),
        fill_mode=_fill_mode(data.get("fill", {})),
        placeholder_style=PlaceholderStyle(data.get("placeholder_style", "dollar")),
        contract_type=data.get("contract_type"),
        installment=_installment_fields(data.get("installment")),
        name_fields=NameFields(
            business=names_raw.get("business", name_defaults.business),
            investor=names_raw.get("investor", name_defaults.investor),
        ),
        fetch_workers=data.get("fetch_workers", 1),
    )
