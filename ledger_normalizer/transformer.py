"""Raw transaction -> ledger row transformation.

Composes installment detection, date normalization and memo synthesis into a
single :class:`~ledger_normalizer.models.LedgerRow` per valid transaction.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from .classify import should_skip
from .dates import format_date, parse_date, spread_installment_date
from .installments import parse_installments
from .logging_setup import get_logger
from .memo import build_memo, memo_source
from .models import UNKNOWN_SOURCE, InstallmentInfo, LedgerRow, RawTransaction

_logger = get_logger("ledger_normalizer.transformer")


def _fmt_amount(d: Decimal) -> str:
    # Exactly two decimals; ASCII dot.
    q = d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{q:.2f}"


def resolve_installments(txn: RawTransaction) -> InstallmentInfo | None:
    """Installment plan from the description, else the one the source attached."""

    return parse_installments(txn.description) or txn.installments


def _governing_date(txn: RawTransaction) -> str | None:
    # Prefer the charge date; it is what the statement shows.
    for candidate in (txn.processed_date, txn.transaction_date):
        if candidate and parse_date(candidate) is not None:
            return candidate
    return None


def transform_transaction(txn: RawTransaction) -> LedgerRow | None:
    """Return the ledger row for ``txn``, or ``None`` when it yields no row.

    Skipped transactions (pending, zero amount) produce no row. Neither does a
    transaction without a parseable date, or one whose installment date would
    shift past ``date.max``.
    """

    if should_skip(txn):
        return None

    installments = resolve_installments(txn)

    raw_date = _governing_date(txn)
    if raw_date is None:
        _logger.debug("no usable date on %r; dropping", txn.description)
        return None

    date = format_date(raw_date)
    if installments is not None and installments.number > 1:
        spread = spread_installment_date(date, installments.number)
        if spread == date:
            _logger.debug("cannot spread %r past %s; dropping", txn.description, date)
            return None
        date = spread

    amount = txn.charged_amount
    if amount is None:
        return None
    outflow = _fmt_amount(abs(amount)) if amount < 0 else ""
    inflow = _fmt_amount(amount) if amount > 0 else ""

    return LedgerRow(
        date=date,
        payee=txn.description.strip(),
        memo=build_memo(txn, installments),
        outflow=outflow,
        inflow=inflow,
    )


def transform_transactions(transactions: Iterable[RawTransaction]) -> list[LedgerRow]:
    """Transform every transaction, drop the ones without a row, newest first."""

    rows = [row for txn in transactions if (row := transform_transaction(txn)) is not None]
    rows.sort(key=lambda r: r.date, reverse=True)
    return rows


def group_by_account(
    transactions: Iterable[RawTransaction],
) -> dict[str, list[RawTransaction]]:
    """Group transactions by account name in first-seen order."""

    by_account: dict[str, list[RawTransaction]] = {}
    for txn in transactions:
        by_account.setdefault(txn.account_name or UNKNOWN_SOURCE, []).append(txn)
    return by_account


def partition_rows_by_source(rows: Iterable[LedgerRow]) -> dict[str, list[LedgerRow]]:
    """Group ledger rows by the ``source`` recorded in their memo.

    Used when exporting one file per account. Rows whose memo carries no
    source land in the ``"unknown"`` bucket.
    """

    by_source: dict[str, list[LedgerRow]] = {}
    for row in rows:
        by_source.setdefault(memo_source(row.memo) or UNKNOWN_SOURCE, []).append(row)
    return by_source


__all__ = [
    "group_by_account",
    "partition_rows_by_source",
    "resolve_installments",
    "transform_transaction",
    "transform_transactions",
]
