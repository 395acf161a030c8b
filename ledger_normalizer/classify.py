"""Validity filtering: decide which transactions become ledger rows.

Pending transactions are checked before amounts, so a pending charge with a
zero amount is reported as ``Pending``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from .logging_setup import get_logger
from .models import RawTransaction, SkippedItem, SkipReason, TransactionStatus

_logger = get_logger("ledger_normalizer.classify")


class Partition(NamedTuple):
    kept: list[RawTransaction]
    skipped: list[SkippedItem]


def classify(txn: RawTransaction) -> SkipReason | None:
    """Return the reason ``txn`` must be skipped, or ``None`` to keep it."""

    if txn.status == TransactionStatus.PENDING:
        return SkipReason.PENDING
    if txn.charged_amount is None or txn.charged_amount == 0:
        return SkipReason.ZERO_AMOUNT
    return None


def should_skip(txn: RawTransaction) -> bool:
    return classify(txn) is not None


def filter_and_partition(transactions: Iterable[RawTransaction]) -> Partition:
    """Split ``transactions`` into kept and skipped, preserving input order."""

    kept: list[RawTransaction] = []
    skipped: list[SkippedItem] = []
    for txn in transactions:
        reason = classify(txn)
        if reason is None:
            kept.append(txn)
        else:
            _logger.debug("skipping %r: %s", txn.description, reason)
            skipped.append(SkippedItem(txn, reason))
    return Partition(kept, skipped)


__all__ = ["Partition", "classify", "filter_and_partition", "should_skip"]
