"""Data models for ``ledger_normalizer``.

Input records arrive from the scraping collaborator as loosely typed JSON
objects (camelCase keys, float amounts, arbitrary date strings). They are
validated into :class:`RawTransaction` / :class:`SourceResult` pydantic
models so the rest of the pipeline can rely on ``Decimal`` amounts and a
closed :class:`TransactionStatus` set.

Derived values (installment info, ledger rows, skip records, summaries) are
plain frozen dataclasses and named tuples: they are produced by this package
and never need input coercion.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_SOURCE = "unknown"
"""Sentinel source key for transactions without an attributed account name."""

NORMAL_TRANSACTION_TYPE = "normal"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TransactionStatus(StrEnum):
    COMPLETED = "completed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    OTHER = "other"


class SkipReason(StrEnum):
    """Why a transaction was excluded from the ledger."""

    PENDING = "Pending"
    ZERO_AMOUNT = "Zero amount"


# ---------------------------------------------------------------------------
# Installments
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InstallmentInfo:
    """Position of a charge within an installment plan (1-based).

    Attributes
    ----------
    number:
        Which installment this charge is.
    total:
        Total number of installments in the plan.
    """

    number: int
    total: int

    def __post_init__(self) -> None:
        for name, val in (("number", self.number), ("total", self.total)):
            # Booleans are ints; disallow them explicitly.
            if isinstance(val, bool) or not isinstance(val, int) or val <= 0:
                raise ValueError(f"InstallmentInfo.{name} must be a positive integer")
        if self.number > self.total:
            raise ValueError(
                f"InstallmentInfo.number ({self.number}) exceeds total ({self.total})"
            )

    @property
    def label(self) -> str:
        return f"{self.number}/{self.total}"


# ---------------------------------------------------------------------------
# Input records (validated)
# ---------------------------------------------------------------------------


class RawTransaction(BaseModel):
    """A single transaction as reported by an institution.

    Accepts both snake_case field names and the scraper's camelCase keys
    (``chargedAmount``, ``processedDate``, ``accountName`` ...). Unknown keys
    are ignored. ``charged_amount`` is signed: negative is an outflow,
    positive an inflow, ``None`` means the source reported no amount.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    description: str = ""
    status: TransactionStatus = TransactionStatus.COMPLETED
    charged_amount: Decimal | None = Field(default=None, alias="chargedAmount")
    original_amount: Decimal | None = Field(default=None, alias="originalAmount")
    original_currency: str | None = Field(default=None, alias="originalCurrency")
    transaction_date: str | None = Field(default=None, alias="date")
    processed_date: str | None = Field(default=None, alias="processedDate")
    identifier: str | None = None
    txn_type: str | None = Field(default=None, alias="type")
    category: str | None = None
    memo: str | None = None
    installments: InstallmentInfo | None = None
    account_number: str | None = Field(default=None, alias="accountNumber")
    account_name: str | None = Field(default=None, alias="accountName")

    @field_validator("description", mode="before")
    @classmethod
    def _none_description_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v: Any) -> TransactionStatus:
        if isinstance(v, TransactionStatus):
            return v
        s = str(v or "").strip().lower()
        try:
            return TransactionStatus(s)
        except ValueError:
            return TransactionStatus.OTHER

    @field_validator("installments", mode="before")
    @classmethod
    def _coerce_installments(cls, v: Any) -> InstallmentInfo | None:
        # Sources sometimes attach placeholder plans ({number: 0, total: 0});
        # anything that does not form a valid plan is treated as absent.
        if v is None or isinstance(v, InstallmentInfo):
            return v
        if isinstance(v, Mapping):
            try:
                return InstallmentInfo(number=v.get("number"), total=v.get("total"))
            except ValueError:
                return None
        return None

    def to_json_dict(self) -> dict[str, Any]:
        """Return the record using the source's camelCase keys (``None`` dropped)."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SourceResult(BaseModel):
    """Outcome of retrieving one institution's transactions."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    account_name: str = Field(alias="accountName")
    success: bool
    transactions: list[RawTransaction] = Field(default_factory=list)
    error: str | None = None


# ---------------------------------------------------------------------------
# Derived records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LedgerRow:
    """One output row for the budgeting tool.

    ``date`` is ``YYYY-MM-DD``. ``outflow``/``inflow`` are non-negative amounts
    with exactly two decimals; exactly one of them is non-empty. ``memo`` is a
    compact JSON object or the empty string.
    """

    date: str
    payee: str
    memo: str
    outflow: str
    inflow: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


class SkippedItem(NamedTuple):
    """A transaction excluded from the ledger together with the reason."""

    transaction: RawTransaction
    reason: SkipReason


class TransformPair(NamedTuple):
    raw: RawTransaction
    transformed: LedgerRow


@dataclass(slots=True)
class AccountTotals:
    count: int = 0
    outflow: Decimal = field(default_factory=Decimal)
    inflow: Decimal = field(default_factory=Decimal)


@dataclass(frozen=True, slots=True)
class TransactionSummary:
    """Per-source and run-wide aggregates over kept transactions.

    ``by_account`` preserves first-seen source order. The totals always equal
    the sum of the per-source values.
    """

    by_account: dict[str, AccountTotals]
    total_outflow: Decimal
    total_inflow: Decimal


__all__ = [
    "NORMAL_TRANSACTION_TYPE",
    "UNKNOWN_SOURCE",
    "AccountTotals",
    "InstallmentInfo",
    "LedgerRow",
    "RawTransaction",
    "SkipReason",
    "SkippedItem",
    "SourceResult",
    "TransactionStatus",
    "TransactionSummary",
    "TransformPair",
]
