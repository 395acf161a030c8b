"""CLI for the ``ledger_normalizer`` package.

This module exposes a callable command handler (``cmd_normalize``) and a
Typer-based console interface. Environment variables are loaded from a local
``.env`` using ``python-dotenv`` before delegating to command logic. Business
logic lives in ``ledger_normalizer.pipeline`` and related modules; this layer
only reads the results file, writes exported rows and the run report.
"""

from __future__ import annotations

import json
import re
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError
from typer.models import ArgumentInfo

from .audit import AuditRecorder
from .config import ConfigError, load_settings
from .logging_setup import configure_logging, get_logger
from .models import LedgerRow, SourceResult
from .pipeline import run_pipeline
from .transformer import partition_rows_by_source

_logger = get_logger("ledger_normalizer.cli")

_RESULTS_ADAPTER: TypeAdapter[list[SourceResult]] = TypeAdapter(list[SourceResult])


# ---- Small module-level helpers used by CLI commands -------------------------


def _serialize_rows(rows: Sequence[LedgerRow]) -> str:
    return json.dumps([r.as_dict() for r in rows], ensure_ascii=False, indent=2) + "\n"


def _safe_name(name: str) -> str:
    return re.sub(r"\W", "-", name).lower()


def _export_rows(
    rows: list[LedgerRow], *, output_dir: Path, split: bool, stamp: str
) -> list[Path]:
    """Write rows as JSON (one file, or one per memo source) and return the paths."""

    output_dir.mkdir(parents=True, exist_ok=True)
    if not split:
        path = output_dir / f"ledger-{stamp}.json"
        path.write_text(_serialize_rows(rows), encoding="utf-8")
        return [path]

    paths: list[Path] = []
    used: set[str] = set()
    for source, source_rows in partition_rows_by_source(rows).items():
        name = base = _safe_name(source)
        n = 1
        # Distinct sources may fold to one file name.
        while name in used:
            n += 1
            name = f"{base}-{n}"
        used.add(name)
        path = output_dir / f"ledger-{name}-{stamp}.json"
        path.write_text(_serialize_rows(source_rows), encoding="utf-8")
        paths.append(path)
    return paths


def cmd_normalize(
    results_path: str,
    *,
    output_dir: str | None = None,
    audit_dir: str | None = None,
    split: bool = False,
    detailed: bool = False,
    sample_limit: int | None = None,
    log_level: str | None = None,
    dry_run: bool = False,
) -> int:
    """Normalize a results JSON file into ledger rows and a run report.

    Returns a process exit code (0 on success, 1 on any boundary failure).
    """

    try:
        settings = load_settings(
            output_dir=output_dir,
            audit_dir=audit_dir,
            sample_limit=sample_limit,
            log_level=log_level,
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)

    try:
        payload = Path(results_path).read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: File not found: {results_path}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: Permission denied: {results_path}", file=sys.stderr)
        return 1

    try:
        results = _RESULTS_ADAPTER.validate_json(payload)
    except ValidationError as e:
        print(f"Error: Invalid results file '{results_path}': {e}", file=sys.stderr)
        return 1

    recorder = AuditRecorder(currency_symbol=settings.currency_symbol)
    outcome = run_pipeline(
        results,
        detailed_logging=detailed,
        sample_limit=settings.sample_limit,
        recorder=recorder,
    )

    if not dry_run and outcome.rows:
        stamp = f"{recorder.log.timestamp:%Y-%m-%d}"
        try:
            paths = _export_rows(
                outcome.rows, output_dir=settings.output_dir, split=split, stamp=stamp
            )
        except OSError as e:
            print(f"Error: failed to write output: {e}", file=sys.stderr)
            return 1
        # Checksum covers the full row set even when split across files.
        recorder.record_output(
            outcome.rows,
            ", ".join(str(p) for p in paths),
            _serialize_rows(outcome.rows),
        )

    report = recorder.render()
    typer.echo(report)

    if not dry_run:
        try:
            settings.audit_dir.mkdir(parents=True, exist_ok=True)
            report_path = settings.audit_dir / recorder.filename()
            report_path.write_text(report, encoding="utf-8")
        except OSError as e:
            print(f"Error: failed to write audit report: {e}", file=sys.stderr)
            return 1
        _logger.info("audit report written to %s", report_path)

    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Normalize retrieved bank/card transactions into budgeting-tool ledger rows "
        "and write an auditable run report. Loads settings from a local .env."
    ),
)


# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect this when used as a default value below.
RESULTS_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Path to a JSON array of per-source results",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
)


@app.command("normalize")
def normalize_cmd(
    results_path: Annotated[Path, RESULTS_PATH_ARGUMENT],
    *,
    output_dir: str | None = typer.Option(
        None, help="Override LEDGER_OUTPUT_DIR for exported rows."
    ),
    audit_dir: str | None = typer.Option(
        None, help="Override LEDGER_AUDIT_DIR for the run report."
    ),
    split: bool = typer.Option(False, help="Write one output file per source account."),
    detailed: bool = typer.Option(
        False, help="Include a sample of raw/transformed pairs in the report."
    ),
    sample_limit: int | None = typer.Option(
        None, help="Max pairs in the sample (0 = all; falls back to LEDGER_SAMPLE_LIMIT)."
    ),
    log_level: str | None = typer.Option(
        None, help="Override LEDGER_NORMALIZER_LOG_LEVEL (e.g. DEBUG, WARNING)."
    ),
    dry_run: bool = typer.Option(False, help="Print the report without writing files."),
) -> None:
    """Normalize a results file and export ledger rows."""

    code = cmd_normalize(
        str(results_path),
        output_dir=output_dir,
        audit_dir=audit_dir,
        split=split,
        detailed=detailed,
        sample_limit=sample_limit,
        log_level=log_level,
        dry_run=dry_run,
    )
    if code:
        raise typer.Exit(code)


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory without overriding any
    already-set environment variables. Logging is configured by the command
    once its settings are resolved.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()
