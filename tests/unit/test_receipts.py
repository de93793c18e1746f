"""Unit tests for receipt consolidation"""

import pytest
from datetime import date
from decimal import Decimal
from receipts_gateway.domain.models import Cash, CreditBalanceDraw, PaymentLine, PaymentRecord
from receipts_gateway.domain.receipts import build_receipt, consolidate, group_payments


def make_payment(payment_id, amount, invoice_id, receipt_number=None, payment_date=date(2026, 10, 1), method=None):
    return PaymentRecord(
        payment_id=payment_id,
        payment_date=payment_date,
        amount=Decimal(amount),
        method=method or Cash(),
        reference=None,
        receipt_number=receipt_number,
        client_id=1,
        client_name="Acme Hardware",
        details=[PaymentLine(invoice_id=invoice_id, amount=Decimal(amount))],
    )


def test_build_receipt_totals_and_invoices():
    """Test sibling payments consolidate into one receipt"""
    payments = [
        make_payment(1, "100.00", invoice_id=10, receipt_number="00000001"),
        make_payment(2, "20.00", invoice_id=11, receipt_number="00000001"),
    ]

    receipt = build_receipt(payments)

    assert receipt.number == "00000001"
    assert receipt.key == "00000001"
    assert receipt.total_amount == Decimal("120.00")
    assert receipt.invoice_ids == [10, 11]
    assert receipt.payment_ids == [1, 2]
    assert receipt.methods == ["CASH"]
    assert len(receipt.lines) == 2
    assert receipt.client_name == "Acme Hardware"


def test_build_receipt_earliest_date():
    """Test receipt date is the earliest payment date of the group"""
    payments = [
        make_payment(5, "10.00", invoice_id=10, receipt_number="00000003", payment_date=date(2026, 10, 3)),
        make_payment(6, "10.00", invoice_id=11, receipt_number="00000003", payment_date=date(2026, 9, 30)),
    ]

    assert build_receipt(payments).receipt_date == date(2026, 9, 30)


def test_build_receipt_distinct_methods():
    """Test mixed methods are listed once each"""
    payments = [
        make_payment(1, "50.00", invoice_id=10, receipt_number="00000002", method=CreditBalanceDraw(Decimal("50.00"))),
        make_payment(2, "30.00", invoice_id=11, receipt_number="00000002"),
        make_payment(3, "5.00", invoice_id=12, receipt_number="00000002"),
    ]

    assert build_receipt(payments).methods == ["CREDIT_BALANCE", "CASH"]


def test_build_receipt_lone_payment_without_number():
    receipt = build_receipt([make_payment(42, "15.00", invoice_id=10)])

    assert receipt.number is None
    assert receipt.key == "42"
    assert receipt.total_amount == Decimal("15.00")


def test_build_receipt_rejects_empty_and_mixed_groups():
    with pytest.raises(ValueError):
        build_receipt([])

    with pytest.raises(ValueError):
        build_receipt([
            make_payment(1, "1.00", invoice_id=10, receipt_number="00000001"),
            make_payment(2, "1.00", invoice_id=10, receipt_number="00000002"),
        ])


def test_group_payments_exact_partition():
    """Test every payment lands in exactly one group"""
    payments = [
        make_payment(1, "10.00", invoice_id=10, receipt_number="00000001"),
        make_payment(2, "10.00", invoice_id=11, receipt_number="00000001"),
        make_payment(3, "10.00", invoice_id=12),
        make_payment(4, "10.00", invoice_id=13, receipt_number="00000002"),
        make_payment(5, "10.00", invoice_id=14),
    ]

    groups = group_payments(payments)

    grouped_ids = sorted(p.payment_id for group in groups.values() for p in group)
    assert grouped_ids == [1, 2, 3, 4, 5]
    assert len(groups) == 4


def test_group_payments_fallback_key_never_collides_with_number():
    """Test payment id 1 without a number stays apart from receipt 00000001"""
    payments = [
        make_payment(1, "10.00", invoice_id=10),
        make_payment(2, "10.00", invoice_id=11, receipt_number="00000001"),
    ]

    assert len(group_payments(payments)) == 2


def test_consolidate_sort_order():
    """Test numbered receipts first (descending), then loose payments by id descending"""
    payments = [
        make_payment(1, "10.00", invoice_id=10, receipt_number="00000002"),
        make_payment(2, "10.00", invoice_id=11),
        make_payment(3, "10.00", invoice_id=12, receipt_number="00000010"),
        make_payment(4, "10.00", invoice_id=13, receipt_number="00000010"),
        make_payment(9, "10.00", invoice_id=14),
    ]

    receipts = consolidate(payments)

    assert [r.key for r in receipts] == ["00000010", "00000002", "9", "2"]
    assert receipts[0].total_amount == Decimal("20.00")


def test_consolidate_empty():
    assert consolidate([]) == []
