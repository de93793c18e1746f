"""Domain models - pure Python dataclasses representing payments and receipts"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Type

from receipts_gateway.domain.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce a number to a 2-place Decimal (floats go through str to avoid binary noise)"""
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    if amount != amount.quantize(CENT):
        raise ValidationError(f"Amount {value} has more than 2 decimal places")
    return amount.quantize(CENT)


class InvoiceStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


@dataclass(frozen=True)
class PaymentMethod:
    """Base of the payment method variants"""

    kind: ClassVar[str] = ""
    is_real_tender: ClassVar[bool] = True


@dataclass(frozen=True)
class Cash(PaymentMethod):
    reference: Optional[str] = None

    kind: ClassVar[str] = "CASH"


@dataclass(frozen=True)
class Transfer(PaymentMethod):
    reference: Optional[str] = None

    kind: ClassVar[str] = "TRANSFER"


@dataclass(frozen=True)
class Card(PaymentMethod):
    reference: Optional[str] = None

    kind: ClassVar[str] = "CARD"


@dataclass(frozen=True)
class CreditBalanceDraw(PaymentMethod):
    """Funds drawn from the client's credit balance. Implied by the request, never chosen."""

    amount: Decimal = ZERO

    kind: ClassVar[str] = "CREDIT_BALANCE"
    is_real_tender: ClassVar[bool] = False


METHODS_BY_KIND: Dict[str, Type[PaymentMethod]] = {
    cls.kind: cls for cls in (Cash, Transfer, Card, CreditBalanceDraw)
}


def selectable_methods() -> List[str]:
    """Payment method kinds a client can pick when paying (real tender only)"""
    return [kind for kind, cls in METHODS_BY_KIND.items() if cls.is_real_tender]


def method_from_kind(
    kind: str,
    reference: Optional[str] = None,
    amount: Decimal | None = None,
) -> PaymentMethod:
    """Rebuild a payment method variant from its persisted kind"""
    cls = METHODS_BY_KIND.get(kind)
    if cls is None:
        raise ValidationError(f"Unknown payment method: {kind}")
    if cls is CreditBalanceDraw:
        return CreditBalanceDraw(amount=to_money(amount))
    return cls(reference=reference)


@dataclass(frozen=True)
class CombinedPaymentRequest:
    """Validated input of a combined payment. Build with allocation.build_request."""

    invoice_ids: List[int]
    total_amount: Decimal
    credit_balance_applied: Decimal
    method: PaymentMethod
    reference: Optional[str]

    @property
    def funds(self) -> Decimal:
        return self.total_amount + self.credit_balance_applied


@dataclass(frozen=True)
class Allocation:
    """Amount of a combined payment applied to one invoice"""

    invoice_id: int
    amount: Decimal


@dataclass
class PaymentLine:
    """Single PaymentDetail of a persisted payment"""

    invoice_id: int
    amount: Decimal


@dataclass
class PaymentRecord:
    """Persisted payment as read back for receipts"""

    payment_id: int
    payment_date: date
    amount: Decimal
    method: PaymentMethod
    reference: Optional[str]
    receipt_number: Optional[str]
    client_id: Optional[int]
    client_name: Optional[str]
    details: List[PaymentLine] = field(default_factory=list)


@dataclass
class ReceiptLine:
    payment_id: int
    invoice_id: int
    amount: Decimal
    method: str
    reference: Optional[str]


@dataclass
class Receipt:
    """Consolidated view of one or more payments sharing a receipt number"""

    key: str
    number: Optional[str]
    receipt_date: date
    total_amount: Decimal
    client_id: Optional[int]
    client_name: Optional[str]
    invoice_ids: List[int]
    methods: List[str]
    payment_ids: List[int]
    lines: List[ReceiptLine]


@dataclass(frozen=True)
class ReceiptFilter:
    client_name: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
