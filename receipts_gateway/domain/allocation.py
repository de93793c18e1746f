"""Payment allocation engine - splits a combined payment across selected invoices"""

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from receipts_gateway.domain.exceptions import ExcessPayment, InsufficientCreditBalance, ValidationError
from receipts_gateway.domain.models import (
    ZERO,
    Allocation,
    CombinedPaymentRequest,
    CreditBalanceDraw,
    PaymentMethod,
    to_money,
)


def build_request(
    invoice_ids: Sequence[int],
    total_amount,
    credit_balance_applied,
    method: Optional[PaymentMethod],
    reference: Optional[str] = None,
    reference_max_length: int = 500,
) -> CombinedPaymentRequest:
    """
    Validate a combined payment and resolve its defaults.

    Rules:
    - At least one invoice, no duplicates
    - Amounts are non-negative and not both zero
    - A real tender method is required when total_amount > 0
    - With no method and total_amount == 0 the payment is a credit balance draw
    - A credit balance draw always carries credit_balance_applied as its amount

    Raises:
        ValidationError: If any rule is broken
    """
    if not invoice_ids:
        raise ValidationError("no invoices selected")
    if len(set(invoice_ids)) != len(invoice_ids):
        raise ValidationError("invoice selected more than once")

    total_amount = to_money(total_amount)
    credit_balance_applied = to_money(credit_balance_applied)
    if total_amount < 0 or credit_balance_applied < 0:
        raise ValidationError("amounts must not be negative")
    if total_amount == 0 and credit_balance_applied == 0:
        raise ValidationError("payment amount must be greater than zero")

    if method is None:
        if total_amount > 0:
            raise ValidationError("method required when amount > 0")
        method = CreditBalanceDraw(amount=credit_balance_applied)
    elif not method.is_real_tender:
        if total_amount > 0:
            raise ValidationError("credit balance cannot be used as tender for a cash amount")
        # The draw is whatever credit_balance_applied says
        method = CreditBalanceDraw(amount=credit_balance_applied)

    if reference is not None:
        reference = reference.strip() or None
    if reference is not None and len(reference) > reference_max_length:
        raise ValidationError(f"reference exceeds {reference_max_length} characters")

    return CombinedPaymentRequest(
        invoice_ids=list(invoice_ids),
        total_amount=total_amount,
        credit_balance_applied=credit_balance_applied,
        method=method,
        reference=reference,
    )


def check_credit_available(requested: Decimal, available: Decimal) -> None:
    """Raise InsufficientCreditBalance when a draw exceeds the client's credit"""
    if requested > available:
        raise InsufficientCreditBalance(requested, available)


def plan_allocation(
    request: CombinedPaymentRequest,
    balances: Iterable[Tuple[int, Decimal]],
) -> List[Allocation]:
    """
    Split the request's funds across invoices in the order given.

    Each invoice takes min(remaining, balance); allocation stops once the
    funds are exhausted, so a later invoice never receives funds while an
    earlier one still has unmet balance.

    Args:
        request: Validated combined payment
        balances: (invoice_id, outstanding_balance) pairs in selection order

    Returns:
        One Allocation per invoice that receives funds

    Raises:
        ExcessPayment: If funds remain after every selected invoice is settled

    Example:
        balances [(A, 100), (B, 50)], funds 120 → [(A, 100), (B, 20)]
    """
    remaining = request.funds
    allocations = []

    for invoice_id, balance in balances:
        if remaining <= 0:
            break
        applied = min(remaining, balance)
        if applied <= 0:
            continue
        allocations.append(Allocation(invoice_id=invoice_id, amount=applied))
        remaining -= applied

    if remaining > 0:
        raise ExcessPayment(remaining)

    return allocations


def allocated_total(allocations: Iterable[Allocation]) -> Decimal:
    return sum((a.amount for a in allocations), ZERO)
