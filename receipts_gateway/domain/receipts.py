"""Receipt consolidation - regroups sibling payments into a single receipt view"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Tuple, Union

from receipts_gateway.domain.models import ZERO, PaymentRecord, Receipt, ReceiptLine

# (True, receipt_number) for numbered payments, (False, payment_id) otherwise.
# The boolean tier keeps the two key spaces from colliding and sorts
# numbered receipts ahead of loose payments.
GroupKey = Tuple[bool, Union[str, int]]


def group_key(payment: PaymentRecord) -> GroupKey:
    if payment.receipt_number:
        return (True, payment.receipt_number)
    return (False, payment.payment_id)


def group_payments(payments: Iterable[PaymentRecord]) -> Dict[GroupKey, List[PaymentRecord]]:
    """Partition payments by receipt number, falling back to the payment id"""
    groups: Dict[GroupKey, List[PaymentRecord]] = OrderedDict()
    for payment in payments:
        groups.setdefault(group_key(payment), []).append(payment)
    return groups


def build_receipt(payments: List[PaymentRecord]) -> Receipt:
    """
    Build one receipt from payments sharing a receipt number (or one lone payment).

    - total_amount: sum of payment amounts
    - invoice_ids: union of invoices covered by the payment details, first-seen order
    - methods: distinct method kinds across the payments, first-seen order
    - receipt_date: earliest payment date
    """
    if not payments:
        raise ValueError("Cannot build a receipt without payments")

    keys = {group_key(p) for p in payments}
    if len(keys) > 1:
        raise ValueError("Payments belong to different receipts")

    ordered = sorted(payments, key=lambda p: p.payment_id)
    first = ordered[0]

    invoice_ids: List[int] = []
    methods: List[str] = []
    lines: List[ReceiptLine] = []
    for payment in ordered:
        if payment.method.kind not in methods:
            methods.append(payment.method.kind)
        for detail in payment.details:
            if detail.invoice_id not in invoice_ids:
                invoice_ids.append(detail.invoice_id)
            lines.append(
                ReceiptLine(
                    payment_id=payment.payment_id,
                    invoice_id=detail.invoice_id,
                    amount=detail.amount,
                    method=payment.method.kind,
                    reference=payment.reference,
                )
            )

    return Receipt(
        key=first.receipt_number or str(first.payment_id),
        number=first.receipt_number,
        receipt_date=min(p.payment_date for p in ordered),
        total_amount=sum((p.amount for p in ordered), ZERO),
        client_id=first.client_id,
        client_name=first.client_name,
        invoice_ids=invoice_ids,
        methods=methods,
        payment_ids=[p.payment_id for p in ordered],
        lines=lines,
    )


def consolidate(payments: Iterable[PaymentRecord]) -> List[Receipt]:
    """
    Group payments into receipts, newest first.

    Numbered receipts come first, ordered by receipt number descending
    (numbers are fixed-width zero-padded, so string order is numeric order).
    Payments without a receipt number follow, ordered by payment id descending.
    """
    groups = group_payments(payments)
    ordered_keys = sorted(groups, reverse=True)
    return [build_receipt(groups[key]) for key in ordered_keys]
