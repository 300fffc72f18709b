from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from sheetdoc.config.loader import ConfigError, ExportConfig, load_config
from sheetdoc.logging.error_log import ErrorLogBuffer
from sheetdoc.logging.init import log_summary, set_debug, setup_logging
from sheetdoc.models.operation_result import ExportOutcome, FormattedSheet, OperationResult
from sheetdoc.services.export_pipeline import (
    ContractRequest,
    ExportRequest,
    draft_contract,
    export_documents,
    export_formatted_sheet,
    render_contract,
    run_operation,
)
from sheetdoc.services.summary import render_summary_line
from sheetdoc.stores.excel import ExcelTableStore, read_excel_file, write_excel_file
from sheetdoc.stores.json_store import JsonDocumentStore, RecordArchive

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (``--config``, $SHEETDOC_CONFIG or
  config/export.yml)
- Run one operation against the workbooks of ``source_directory``
- Write document batches / archived records / formatted workbooks under
  ``output_directory``
- Flush the JSON Lines error log and print the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = Path("config/export.yml")
CONFIG_ENV_VAR = "SHEETDOC_CONFIG"
OPERATIONS = ("export", "contract", "format-sheet")

RECORDS_SUBDIR = "records"
DOCUMENTS_SUBDIR = "documents"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True: values from .env win over the existing environment.
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Spreadsheet rows -> document placeholder replacement")
    p.add_argument("--config", type=Path, default=None, help="Config YAML path")
    p.add_argument("--operation", choices=OPERATIONS, default="export", help="Operation to run")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    return p.parse_args(argv)


def _resolve_config_path(arg: Path | None) -> Path:
    if arg is not None:
        return arg
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _inspect_data(cfg: ExportConfig) -> int:
    directory = Path(cfg.source_directory)
    excel_files = sorted(p for p in directory.iterdir() if p.suffix == ".xlsx")
    if not excel_files:
        print("inspect: no .xlsx files")
        return EXIT_SUCCESS_ALL
    for f in excel_files:
        print(f"FILE: {f.name}")
        for sname, table in read_excel_file(f).items():
            print(f"  SHEET: {sname} cols={list(table.header)} rows={table.available_rows}")
            print("    sample_rows=", [list(r) for r in table.rows[:3]])
    return EXIT_SUCCESS_ALL


def _run(operation: str, cfg: ExportConfig, error_log: ErrorLogBuffer) -> OperationResult:
    table_store = ExcelTableStore(Path(cfg.source_directory))
    output_dir = Path(cfg.output_directory)
    document_store = JsonDocumentStore(output_dir / DOCUMENTS_SUBDIR)

    if operation == "export":
        request = ExportRequest(
            document_id=cfg.document_id,
            selectors=cfg.sheets,
            from_row=cfg.range.from_row,
            to_row=cfg.range.to_row,
            exact=cfg.range.exact,
            mode=cfg.fill_mode,
        )
        return run_operation(
            operation,
            lambda: export_documents(
                request,
                table_store,
                document_store,
                style=cfg.placeholder_style,
                fetch_workers=cfg.fetch_workers,
                installment=cfg.installment,
            ),
            error_log=error_log,
        )

    if operation == "contract":
        archive = RecordArchive(output_dir / RECORDS_SUBDIR)

        def contract() -> ExportOutcome:
            request = ContractRequest(
                selectors=cfg.sheets,
                row=cfg.range.from_row,
                contract_type=cfg.contract_type or "",
            )
            draft = draft_contract(
                request,
                table_store,
                name_fields=cfg.name_fields,
                installment=cfg.installment,
                row_pointer_field=cfg.row_pointer_field,
                archive=archive,
            )
            return render_contract(cfg.document_id, draft.file_name, archive, document_store)

        return run_operation(operation, contract, error_log=error_log)

    def format_sheet() -> FormattedSheet:
        selector = cfg.sheets[0]
        formatted = export_formatted_sheet(selector, cfg.range.from_row, cfg.range.to_row, table_store)
        path = write_excel_file(output_dir / f"{formatted.title}.xlsx", formatted.table, selector.sheet_name)
        print(f"format-sheet: {path} range={formatted.a1_range}")
        return formatted

    return run_operation(operation, format_sheet, error_log=error_log)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # argv=[] must not fall back to sys.argv (pytest flags would leak in)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    config_path = _resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"operation={args.operation} source={directory} document={cfg.document_id}")
    error_log = ErrorLogBuffer(operation=args.operation, document_id=cfg.document_id)
    started = time.perf_counter()
    result = _run(args.operation, cfg, error_log)
    elapsed = time.perf_counter() - started

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    summary_line = render_summary_line(args.operation, result, elapsed)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    return EXIT_SUCCESS_ALL if result.ok else EXIT_PARTIAL_FAILURE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
