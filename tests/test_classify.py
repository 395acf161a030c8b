import pytest

from ledger_normalizer import (
    RawTransaction,
    SkipReason,
    TransactionStatus,
    classify,
    filter_and_partition,
    should_skip,
)


def _txn(amount, status="completed", description="Test") -> RawTransaction:
    return RawTransaction.model_validate(
        {
            "description": description,
            "status": status,
            "chargedAmount": amount,
            "processedDate": "2024-03-15",
        }
    )


@pytest.mark.parametrize(
    ("amount", "status", "expected"),
    [
        (-100, "completed", None),
        (250, "completed", None),
        (-100, "cancelled", None),
        (-100, "pending", SkipReason.PENDING),
        (0, "completed", SkipReason.ZERO_AMOUNT),
        (None, "completed", SkipReason.ZERO_AMOUNT),
        # Pending is checked before the amount.
        (0, "pending", SkipReason.PENDING),
        (None, "pending", SkipReason.PENDING),
    ],
)
def test_classify(amount, status, expected):
    assert classify(_txn(amount, status)) == expected
    assert should_skip(_txn(amount, status)) is (expected is not None)


def test_skip_reason_text_is_stable():
    assert SkipReason.PENDING == "Pending"
    assert SkipReason.ZERO_AMOUNT == "Zero amount"


def test_unknown_status_is_kept():
    txn = _txn(-10, status="weird")
    assert txn.status is TransactionStatus.OTHER
    assert classify(txn) is None


def test_filter_and_partition_preserves_order():
    txns = [
        _txn(-10, description="a"),
        _txn(-20, status="pending", description="b"),
        _txn(30, description="c"),
        _txn(0, description="d"),
        _txn(-40, description="e"),
    ]
    kept, skipped = filter_and_partition(txns)

    assert [t.description for t in kept] == ["a", "c", "e"]
    assert [(s.transaction.description, s.reason) for s in skipped] == [
        ("b", SkipReason.PENDING),
        ("d", SkipReason.ZERO_AMOUNT),
    ]


def test_filter_and_partition_empty():
    result = filter_and_partition([])
    assert result.kept == []
    assert result.skipped == []
