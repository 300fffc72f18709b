from __future__ import annotations
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from sheetdoc.cli.__main__ import main as cli_main
from sheetdoc.models.operation_result import OperationResult


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv("SHEETDOC_CONFIG", raising=False)


def test_cli_missing_config_is_fatal(temp_workdir: Path, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_cli_directory_missing(write_config: Path, capsys):
    text = write_config.read_text(encoding="utf-8").replace("./data", "./missing_dir")
    write_config.write_text(text, encoding="utf-8")
    code = cli_main([])
    assert code == 1
    assert "ERROR directory not found:" in capsys.readouterr().out


def test_cli_export_success(write_config: Path, excel_sources: Path, temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY operation=export status=200 records=2 instructions=8 documents=2" in out
    written = sorted((temp_workdir / "out" / "documents").glob("*.json"))
    assert [p.name for p in written] == ["doc-001-1.json", "doc-001-2.json"]
    body = json.loads(written[0].read_text(encoding="utf-8"))
    texts = {r["replaceAllText"]["containsText"]["text"]: r["replaceAllText"]["replaceText"] for r in body["requests"]}
    assert texts["${{ID}}"] == "x-xxxx-xxxx0-12-x"
    assert texts["${{Branch}}"] == "North"


def test_cli_structured_failure_exit_2_and_error_log(write_config: Path, excel_sources: Path, temp_workdir: Path, capsys):
    text = write_config.read_text(encoding="utf-8").replace("sheet_name: Loans", "sheet_name: Missing")
    write_config.write_text(text, encoding="utf-8")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR export: SHEET_NOT_FOUND" in out
    assert "SUMMARY operation=export status=404 records=0" in out
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    entry = json.loads(logs[0].read_text(encoding="utf-8").strip())
    assert entry["error_kind"] == "SHEET_NOT_FOUND"
    assert entry["document_id"] == "doc-001"
    assert entry["operation"] == "export"
    assert not (temp_workdir / "out" / "documents").exists()


def test_cli_config_flag_and_env_override(write_config: Path, excel_sources: Path, temp_workdir: Path, monkeypatch, capsys):
    other = temp_workdir / "config" / "other.yml"
    other.write_text(write_config.read_text(encoding="utf-8").replace("doc-001", "doc-env"), encoding="utf-8")
    write_config.unlink()

    monkeypatch.setenv("SHEETDOC_CONFIG", str(other))
    assert cli_main([]) == 0
    assert (temp_workdir / "out" / "documents" / "doc-env-1.json").exists()

    monkeypatch.delenv("SHEETDOC_CONFIG")
    assert cli_main(["--config", str(other)]) == 0


def test_cli_env_file_sets_config_path(write_config: Path, excel_sources: Path, temp_workdir: Path, monkeypatch):
    # registered so monkeypatch removes the value .env writes into os.environ
    monkeypatch.setenv("SHEETDOC_CONFIG", "unused.yml")
    target = temp_workdir / "config" / "from_env.yml"
    target.write_text(write_config.read_text(encoding="utf-8"), encoding="utf-8")
    write_config.unlink()
    (temp_workdir / ".env").write_text(f"SHEETDOC_CONFIG={target}\n", encoding="utf-8")
    assert cli_main([]) == 0


def test_cli_debug_mode(write_config: Path, excel_sources: Path, capsys):
    with patch("sheetdoc.cli.__main__.run_operation", return_value=OperationResult(404, "nope")):
        code = cli_main(["--debug"])
    out = capsys.readouterr().out
    assert code == 2
    assert "DEBUG debug mode enabled" in out


def test_cli_inspect_data(write_config: Path, excel_sources: Path, capsys):
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "FILE: loans.xlsx" in out
    assert "SHEET: Persons cols=['Name', 'ID'] rows=2" in out
    assert "SUMMARY" not in out


def test_cli_format_sheet(write_config: Path, excel_sources: Path, temp_workdir: Path, capsys):
    code = cli_main(["--operation", "format-sheet"])
    out = capsys.readouterr().out
    assert code == 0
    assert "range=A1:B3" in out
    assert (temp_workdir / "out" / "people-Format.xlsx").exists()
    assert "SUMMARY operation=format-sheet status=200 records=2" in out


def test_cli_contract_without_type_fails(write_config: Path, excel_sources: Path, capsys):
    code = cli_main(["--operation", "contract"])
    assert code == 2
    assert "INVALID_REQUEST" in capsys.readouterr().out


def test_cli_rejects_unknown_operation(write_config: Path):
    with pytest.raises(SystemExit):
        cli_main(["--operation", "zip"])
