"""Memo synthesis: a compact JSON annotation built from sparse metadata.

Only keys with meaningful values are emitted, always in the same order:

- ``transactionDate``: purchase date, only when it differs from the charge date
- ``chargeDate``: processed/charge date
- ``installment``: ``"N/M"``
- ``originalAmount`` / ``originalCurrency``: only for currency conversions
- ``ref``: the source's reference identifier
- ``account`` / ``source``: account number and account (institution) name
- ``type``: only for non-``normal`` transaction types
- ``category`` / ``bankMemo``: free text supplied by the bank

A transaction with none of these produces ``""`` rather than ``"{}"``.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from .dates import format_date, parse_date
from .models import NORMAL_TRANSACTION_TYPE, InstallmentInfo, RawTransaction

# Differences at or below this are rounding noise, not a conversion.
CONVERSION_TOLERANCE = Decimal("0.01")


def _json_number(d: Decimal) -> int | float:
    return int(d) if d == d.to_integral_value() else float(d)


def build_memo(txn: RawTransaction, installments: InstallmentInfo | None) -> str:
    memo: dict[str, Any] = {}

    if txn.transaction_date and txn.processed_date and txn.transaction_date != txn.processed_date:
        txn_date = parse_date(txn.transaction_date)
        if txn_date is not None:
            memo["transactionDate"] = format_date(txn_date)

    if txn.processed_date:
        charge_date = parse_date(txn.processed_date)
        if charge_date is not None:
            memo["chargeDate"] = format_date(charge_date)

    # Prefer the plan parsed from the description over the source's own field.
    plan = installments or txn.installments
    if plan is not None:
        memo["installment"] = plan.label

    if (
        txn.original_amount is not None
        and txn.charged_amount is not None
        and abs(txn.original_amount - txn.charged_amount) > CONVERSION_TOLERANCE
    ):
        memo["originalAmount"] = _json_number(txn.original_amount)
        if txn.original_currency:
            memo["originalCurrency"] = txn.original_currency

    if txn.identifier:
        memo["ref"] = txn.identifier
    if txn.account_number:
        memo["account"] = txn.account_number
    if txn.account_name:
        memo["source"] = txn.account_name
    if txn.txn_type and txn.txn_type != NORMAL_TRANSACTION_TYPE:
        memo["type"] = txn.txn_type
    if txn.category:
        memo["category"] = txn.category
    if txn.memo:
        memo["bankMemo"] = txn.memo

    if not memo:
        return ""
    return json.dumps(memo, ensure_ascii=False, separators=(",", ":"))


def memo_source(memo: str | None) -> str | None:
    """Return the ``source`` key of a serialized memo, or ``None``.

    Empty memos, non-JSON text and memos without a string ``source`` all
    yield ``None``.
    """

    if not memo:
        return None
    try:
        data = json.loads(memo)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    source = data.get("source")
    return source if isinstance(source, str) and source else None


__all__ = ["CONVERSION_TOLERANCE", "build_memo", "memo_source"]
