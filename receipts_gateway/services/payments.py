"""Combined payment registration - allocates funds and issues one receipt"""

import logging
import time
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from receipts_gateway.config import settings
from receipts_gateway.domain.allocation import (
    allocated_total,
    build_request,
    check_credit_available,
    plan_allocation,
)
from receipts_gateway.domain.exceptions import DomainException, NotFound, ValidationError
from receipts_gateway.domain.models import PaymentMethod
from receipts_gateway.infrastructure.database.models import Payment
from receipts_gateway.infrastructure.database.repositories import (
    ClientRepository,
    InvoiceRepository,
    PaymentRepository,
)
from receipts_gateway.infrastructure.observability.logging import log_combined_payment, log_payment_rejected
from receipts_gateway.infrastructure.observability.metrics import record_combined_payment, record_rejection
from receipts_gateway.services.numbering import ReceiptNumberService

logger = logging.getLogger(__name__)


class PaymentService:
    """Payment allocation engine over a transactional session"""

    def __init__(self, db: Session):
        self.db = db
        self.invoices = InvoiceRepository(db)
        self.clients = ClientRepository(db)
        self.payments = PaymentRepository(db)
        self.numbering = ReceiptNumberService(db)

    def register_combined_payment(
        self,
        invoice_ids: Sequence[int],
        total_amount,
        credit_balance_applied=0,
        method: Optional[PaymentMethod] = None,
        reference: Optional[str] = None,
        payment_date: date | None = None,
        request_id: str = "unknown",
    ) -> str:
        """
        Register one payment action spread over several invoices.

        Flow (single transaction, all-or-nothing):
        1. Validate the request and resolve the default method
        2. Lock the selected invoices and the client
        3. Check the credit balance draw and plan the allocation in selection order
        4. Create one Payment (with one detail) per invoice receiving funds
        5. Draw the client's credit balance
        6. Stamp every created Payment with one new receipt number
        7. Commit

        Not idempotent: submitting the same request twice issues two receipts.

        Returns:
            The receipt number shared by the created payments

        Raises:
            ValidationError, NotFound, InsufficientCreditBalance, ExcessPayment
        """
        start_time = time.time()
        payment_date = payment_date or date.today()

        try:
            request = build_request(
                invoice_ids,
                total_amount,
                credit_balance_applied,
                method,
                reference,
                reference_max_length=settings.reference_max_length,
            )

            locked = {invoice.id: invoice for invoice in self.invoices.lock_many(request.invoice_ids)}
            missing = [invoice_id for invoice_id in request.invoice_ids if invoice_id not in locked]
            if missing:
                raise NotFound(f"Invoice not found: {missing[0]}")
            selected = [locked[invoice_id] for invoice_id in request.invoice_ids]

            client_ids = {invoice.client_id for invoice in selected}
            if len(client_ids) != 1:
                raise ValidationError("selected invoices belong to different clients")
            client_id = client_ids.pop()
            client = self.clients.lock(client_id)
            if client is None:
                raise NotFound("Client not found")

            check_credit_available(request.credit_balance_applied, client.credit_balance)
            allocations = plan_allocation(request, [(inv.id, inv.balance) for inv in selected])
            if allocated_total(allocations) != request.funds:
                raise RuntimeError("Allocated funds do not match the requested funds")

            created: List[Payment] = []
            for allocation in allocations:
                invoice = locked[allocation.invoice_id]
                payment = Payment.create(
                    amount=allocation.amount,
                    method=request.method,
                    invoice=invoice,
                    payment_date=payment_date,
                    reference=request.reference,
                )
                invoice.apply_payment(allocation.amount)
                created.append(self.payments.add(payment))

            if request.credit_balance_applied > 0:
                client.draw_credit(request.credit_balance_applied)

            receipt_number = self.numbering.next_number()
            for payment in created:
                payment.receipt_number = receipt_number

            self.db.commit()

        except DomainException as e:
            self.db.rollback()
            record_rejection(type(e).__name__)
            log_payment_rejected(request_id, list(invoice_ids or []), type(e).__name__, str(e))
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Combined payment failed", extra={"request_id": request_id})
            raise

        duration_ms = (time.time() - start_time) * 1000
        record_combined_payment(request.total_amount, request.credit_balance_applied, len(created))
        log_combined_payment(
            request_id=request_id,
            receipt_number=receipt_number,
            client_id=client_id,
            invoice_ids=[a.invoice_id for a in allocations],
            total_amount=request.total_amount,
            credit_balance_applied=request.credit_balance_applied,
            method=request.method.kind,
            duration_ms=duration_ms,
        )
        return receipt_number

    def get_payment(self, payment_id: int) -> Payment:
        payment = self.payments.get_by_id(payment_id)
        if payment is None:
            raise NotFound(f"Payment not found: {payment_id}")
        return payment
