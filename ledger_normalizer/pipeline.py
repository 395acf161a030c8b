"""End-to-end run over per-source results.

``run_pipeline`` is the in-memory core of a run: classify every transaction
from the successful sources, transform the kept ones into ledger rows,
aggregate them, and feed each phase to the run's :class:`AuditRecorder`.
Exporting the rows (and recording that export) is the caller's job.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .audit import AuditRecorder
from .classify import classify
from .logging_setup import get_logger
from .models import (
    LedgerRow,
    RawTransaction,
    SkippedItem,
    SourceResult,
    TransactionSummary,
    TransformPair,
)
from .summary import calculate_summary
from .transformer import transform_transaction

_logger = get_logger("ledger_normalizer.pipeline")


@dataclass(frozen=True, slots=True)
class PipelineResult:
    kept: list[RawTransaction]
    skipped: list[SkippedItem]
    rows: list[LedgerRow]
    summary: TransactionSummary
    audit: AuditRecorder


def run_pipeline(
    results: Iterable[SourceResult],
    *,
    detailed_logging: bool = False,
    sample_limit: int = 0,
    recorder: AuditRecorder | None = None,
) -> PipelineResult:
    """Normalize all successful source results into ledger rows.

    Parameters
    ----------
    results:
        Per-source retrieval outcomes, in processing order. Failed sources
        contribute no transactions.
    detailed_logging:
        When true, record (raw, transformed) pairs as a diagnostic sample in
        the audit trail.
    sample_limit:
        Maximum number of pairs to keep in the sample; ``<= 0`` keeps all.
    recorder:
        Audit recorder for this run. A fresh one is created when omitted.
    """

    results = list(results)
    audit = recorder if recorder is not None else AuditRecorder()
    audit.record_results(results)

    failed = [r for r in results if not r.success]
    for r in failed:
        _logger.warning("source %s failed: %s", r.account_name, r.error or "unknown error")

    kept: list[RawTransaction] = []
    skipped: list[SkippedItem] = []
    for result in results:
        if not result.success:
            continue
        for txn in result.transactions:
            reason = classify(txn)
            if reason is None:
                kept.append(txn)
                continue
            skipped.append(SkippedItem(txn, reason))
            audit.record_skipped(txn, reason)
            _logger.debug("skipped %r (%s)", txn.description, reason)

    rows: list[LedgerRow] = []
    pairs: list[TransformPair] = []
    for txn in kept:
        row = transform_transaction(txn)
        if row is None:
            continue
        rows.append(row)
        if detailed_logging:
            pairs.append(TransformPair(txn, row))
    rows.sort(key=lambda r: r.date, reverse=True)

    if detailed_logging and pairs:
        audit.record_transform_sample(pairs, sample_limit)

    summary = calculate_summary(kept)
    _logger.info(
        "processed %d source(s) (%d failed): %d kept, %d skipped, %d rows",
        len(results),
        len(failed),
        len(kept),
        len(skipped),
        len(rows),
    )
    return PipelineResult(
        kept=kept,
        skipped=skipped,
        rows=rows,
        summary=summary,
        audit=audit,
    )


__all__ = ["PipelineResult", "run_pipeline"]
