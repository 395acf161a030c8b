"""Public interface for the ``ledger_normalizer`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
"""

from .audit import AccountSummary, AuditLog, AuditRecorder, compute_checksum, format_audit_log
from .classify import Partition, classify, filter_and_partition, should_skip
from .dates import FormatError, format_date, parse_date, spread_installment_date
from .installments import INSTALLMENT_MATCHERS, InstallmentMatcher, parse_installments
from .memo import build_memo, memo_source
from .models import (
    UNKNOWN_SOURCE,
    AccountTotals,
    InstallmentInfo,
    LedgerRow,
    RawTransaction,
    SkippedItem,
    SkipReason,
    SourceResult,
    TransactionStatus,
    TransactionSummary,
    TransformPair,
)
from .pipeline import PipelineResult, run_pipeline
from .summary import calculate_summary
from .transformer import (
    group_by_account,
    partition_rows_by_source,
    transform_transaction,
    transform_transactions,
)

__all__ = [
    # API
    "build_memo",
    "calculate_summary",
    "classify",
    "compute_checksum",
    "filter_and_partition",
    "format_audit_log",
    "format_date",
    "group_by_account",
    "memo_source",
    "parse_date",
    "parse_installments",
    "partition_rows_by_source",
    "run_pipeline",
    "should_skip",
    "spread_installment_date",
    "transform_transaction",
    "transform_transactions",
    # Models / types
    "INSTALLMENT_MATCHERS",
    "UNKNOWN_SOURCE",
    "AccountSummary",
    "AccountTotals",
    "AuditLog",
    "AuditRecorder",
    "FormatError",
    "InstallmentInfo",
    "InstallmentMatcher",
    "LedgerRow",
    "Partition",
    "PipelineResult",
    "RawTransaction",
    "SkipReason",
    "SkippedItem",
    "SourceResult",
    "TransactionStatus",
    "TransactionSummary",
    "TransformPair",
]
