"""Per-account inflow/outflow aggregation over kept transactions."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from .models import UNKNOWN_SOURCE, AccountTotals, RawTransaction, TransactionSummary


def split_amount(amount: Decimal | None) -> tuple[Decimal, Decimal]:
    """Return ``(outflow, inflow)`` magnitudes for a signed amount."""

    if amount is None or amount == 0:
        return Decimal(0), Decimal(0)
    if amount < 0:
        return abs(amount), Decimal(0)
    return Decimal(0), amount


def calculate_summary(transactions: Iterable[RawTransaction]) -> TransactionSummary:
    """Aggregate count, outflow and inflow per account name.

    Callers pass the classifier's kept list. Transactions without an account
    name are attributed to ``"unknown"``. Run-wide totals are summed from the
    per-account values so the two always agree.
    """

    by_account: dict[str, AccountTotals] = {}
    for txn in transactions:
        totals = by_account.setdefault(txn.account_name or UNKNOWN_SOURCE, AccountTotals())
        outflow, inflow = split_amount(txn.charged_amount)
        totals.outflow += outflow
        totals.inflow += inflow
        totals.count += 1

    total_outflow = sum((t.outflow for t in by_account.values()), Decimal(0))
    total_inflow = sum((t.inflow for t in by_account.values()), Decimal(0))
    return TransactionSummary(
        by_account=by_account,
        total_outflow=total_outflow,
        total_inflow=total_inflow,
    )


__all__ = ["calculate_summary", "split_amount"]
