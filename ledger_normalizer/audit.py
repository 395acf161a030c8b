"""Run-scoped audit trail: what was retrieved, skipped, transformed and exported.

An :class:`AuditRecorder` is created at the start of a run and owned by that
run alone (there is no shared or module-level audit state). It accumulates
state in phases:

- ``record_results``: one :class:`AccountSummary` per *successful* source,
  totals computed from that source's raw transactions. Failed sources are
  not listed here.
- ``record_skipped``: one entry per excluded transaction, appended while
  classifying.
- ``record_transform_sample``: a bounded sample of (raw, transformed) pairs.
  Calling it again replaces the previous sample.
- ``record_output``: output reference, row count, totals recomputed from the
  exported rows, and a SHA-256 checksum prefix of the exported content.

The per-source totals and the output totals are computed independently and
are expected to differ when transactions were skipped; the gap is the
visible cost of skipping.

``render()`` may be called at any time and reflects whatever has been
recorded so far. The report never contains the unprocessed source payload,
only the transform sample.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .logging_setup import get_logger
from .models import LedgerRow, RawTransaction, SkippedItem, SkipReason, SourceResult, TransformPair
from .summary import split_amount

_logger = get_logger("ledger_normalizer.audit")

CHECKSUM_LENGTH = 16
DEFAULT_CURRENCY_SYMBOL = "₪"


@dataclass(frozen=True, slots=True)
class AccountSummary:
    name: str
    transaction_count: int
    total_outflow: Decimal
    total_inflow: Decimal


@dataclass(slots=True)
class AuditLog:
    """Mutable state behind an :class:`AuditRecorder`.

    Fields start empty/zero and are filled phase by phase.
    ``transform_sample`` stays ``None`` until a sample is recorded.
    """

    timestamp: datetime
    accounts: list[AccountSummary] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)
    output_file: str | None = None
    output_transaction_count: int = 0
    total_outflow: Decimal = field(default_factory=Decimal)
    total_inflow: Decimal = field(default_factory=Decimal)
    checksum: str | None = None
    transform_sample: list[TransformPair] | None = None
    transform_sample_limit: int = 0
    transform_pairs_seen: int = 0


def compute_checksum(content: str | bytes) -> str:
    """Return the first 16 hex digits of the SHA-256 of ``content`` (UTF-8)."""

    data = content.encode("utf-8") if isinstance(content, str) else content
    return hashlib.sha256(data).hexdigest()[:CHECKSUM_LENGTH]


def _parse_row_amount(raw: str) -> Decimal:
    s = (raw or "").strip()
    if not s:
        return Decimal(0)
    try:
        return Decimal(s)
    except InvalidOperation:
        _logger.warning("unparseable amount in output row: %r", raw)
        return Decimal(0)


class AuditRecorder:
    """Accumulates the audit trail of a single run."""

    def __init__(
        self,
        *,
        timestamp: datetime | None = None,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ) -> None:
        self._log = AuditLog(timestamp=timestamp or datetime.now(UTC))
        self._currency_symbol = currency_symbol

    @property
    def log(self) -> AuditLog:
        return self._log

    def record_results(self, results: Iterable[SourceResult]) -> None:
        for result in results:
            if not result.success:
                continue
            outflow = Decimal(0)
            inflow = Decimal(0)
            for txn in result.transactions:
                out, inn = split_amount(txn.charged_amount)
                outflow += out
                inflow += inn
            self._log.accounts.append(
                AccountSummary(
                    name=result.account_name,
                    transaction_count=len(result.transactions),
                    total_outflow=outflow,
                    total_inflow=inflow,
                )
            )

    def record_skipped(self, txn: RawTransaction, reason: SkipReason) -> None:
        self._log.skipped.append(SkippedItem(txn, reason))

    def record_transform_sample(self, pairs: Sequence[TransformPair], limit: int = 0) -> None:
        """Store up to ``limit`` pairs (all of them when ``limit <= 0``)."""

        self._log.transform_sample_limit = limit
        self._log.transform_pairs_seen = len(pairs)
        self._log.transform_sample = list(pairs[:limit] if limit > 0 else pairs)

    def record_output(
        self,
        rows: Sequence[LedgerRow],
        output_reference: str,
        exported_content: str | bytes,
    ) -> None:
        """Record the export; totals are re-derived from the rows themselves."""

        total_outflow = Decimal(0)
        total_inflow = Decimal(0)
        for row in rows:
            total_outflow += _parse_row_amount(row.outflow)
            total_inflow += _parse_row_amount(row.inflow)

        self._log.output_file = output_reference
        self._log.output_transaction_count = len(rows)
        self._log.total_outflow = total_outflow
        self._log.total_inflow = total_inflow
        self._log.checksum = compute_checksum(exported_content)
        _logger.info(
            "recorded output %s: %d rows, checksum %s",
            output_reference,
            len(rows),
            self._log.checksum,
        )

    def render(self) -> str:
        return format_audit_log(self._log, currency_symbol=self._currency_symbol)

    def filename(self) -> str:
        """Report file name derived from the run timestamp (filesystem safe)."""

        return f"run-{self._log.timestamp:%Y-%m-%dT%H-%M-%S}.log"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _format_currency(amount: Decimal, symbol: str) -> str:
    q = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{symbol}{q:,.2f}"


def _format_timestamp(ts: datetime) -> str:
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _indent_json(data: object) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2).replace("\n", "\n    ")


def format_audit_log(log: AuditLog, *, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Render ``log`` as the plain-text run report.

    Section headers (``Accounts:``, ``Skipped (N):``, ``Output:``,
    ``Transformation Details:``) are stable; callers may parse them.
    """

    def money(amount: Decimal) -> str:
        return _format_currency(amount, currency_symbol)

    lines: list[str] = [f"=== Scrape Run: {_format_timestamp(log.timestamp)} ===", ""]

    lines.append("Accounts:")
    if not log.accounts:
        lines.append("  (none)")
    for account in log.accounts:
        lines.append(
            f"  {account.name}: {account.transaction_count} transactions "
            f"({money(account.total_outflow)} out, {money(account.total_inflow)} in)"
        )
    lines.append("")

    lines.append(f"Skipped ({len(log.skipped)}):")
    if not log.skipped:
        lines.append("  (none)")
    for txn, reason in log.skipped:
        amount = abs(txn.charged_amount) if txn.charged_amount is not None else Decimal(0)
        date = (txn.processed_date or txn.transaction_date or "unknown").split("T")[0]
        lines.append(f'  - {reason}: "{txn.description}" {money(amount)} ({date})')
    lines.append("")

    if log.output_file:
        lines.append(f"Output: {log.output_file}")
        lines.append(f"  {log.output_transaction_count} transactions")
        lines.append(
            f"  Total: {money(log.total_outflow)} outflow, {money(log.total_inflow)} inflow"
        )
        lines.append("")
        lines.append(f"Checksum: {log.checksum}")
    else:
        lines.append("Output: (none - dry run or no transactions)")

    if log.transform_sample:
        shown = len(log.transform_sample)
        lines.append("")
        lines.append("Transformation Details:")
        if shown < log.transform_pairs_seen:
            lines.append(
                f"  (Showing first {shown} of {log.transform_pairs_seen} transformation(s))"
            )
        else:
            lines.append(f"  (Showing all {shown} transformation(s))")
        lines.append("")
        for i, (raw, transformed) in enumerate(log.transform_sample, start=1):
            lines.append(f"[{i}] RAW:")
            lines.append(f"    {_indent_json(raw.to_json_dict())}")
            lines.append("    TRANSFORMED:")
            lines.append(f"    {_indent_json(transformed.as_dict())}")
            lines.append("")

    return "\n".join(lines)


__all__ = [
    "CHECKSUM_LENGTH",
    "AccountSummary",
    "AuditLog",
    "AuditRecorder",
    "compute_checksum",
    "format_audit_log",
]
