"""Receipt queries - listing and detail views built from payment rows"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from receipts_gateway.domain.exceptions import NotFound, ValidationError
from receipts_gateway.domain.models import Receipt, ReceiptFilter
from receipts_gateway.domain.receipts import build_receipt, consolidate
from receipts_gateway.infrastructure.database.repositories import PaymentRepository, to_payment_record


class ReceiptService:
    """Read side of payments: regroups sibling payments into receipts"""

    def __init__(self, db: Session):
        self.payments = PaymentRepository(db)

    def list_receipts(
        self,
        client_name: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Receipt]:
        """
        Receipts for payments matching the filter, newest first.

        Date bounds are inclusive; a missing bound is unbounded. Every
        matching payment lands in exactly one receipt.
        """
        criteria = ReceiptFilter(
            client_name=(client_name or "").strip() or None,
            date_from=date_from,
            date_to=date_to,
        )
        if criteria.date_from and criteria.date_to and criteria.date_from > criteria.date_to:
            raise ValidationError("date_from must not be after date_to")

        payments = self.payments.list_filtered(criteria.client_name, criteria.date_from, criteria.date_to)
        return consolidate(to_payment_record(p) for p in payments)

    def get_receipt_by_payment_id(self, payment_id: int) -> Receipt:
        """Receipt built from a single payment, even if it has siblings"""
        payment = self.payments.get_by_id(payment_id)
        if payment is None:
            raise NotFound(f"Payment not found: {payment_id}")
        return build_receipt([to_payment_record(payment)])

    def get_receipt_by_number(self, receipt_number: str) -> Receipt:
        """Consolidated receipt over every payment stamped with the number"""
        payments = self.payments.get_by_receipt_number(receipt_number)
        if not payments:
            raise NotFound(f"Receipt not found: {receipt_number}")
        return build_receipt([to_payment_record(p) for p in payments])
