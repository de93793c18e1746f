"""Data access layer for invoices, clients and payments"""

from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from receipts_gateway.infrastructure.database.models import Client, Invoice, Payment, PaymentDetail
from receipts_gateway.domain.models import InvoiceStatus, PaymentLine, PaymentRecord, method_from_kind


class InvoiceRepository:
    """Repository for invoices"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, invoice_id: int) -> Optional[Invoice]:
        return self.db.get(Invoice, invoice_id)

    def find_unpaid_by_client(self, client_id: int) -> List[Invoice]:
        """Unpaid invoices of a client, oldest first"""
        return (
            self.db.query(Invoice)
            .filter(Invoice.client_id == client_id, Invoice.status == InvoiceStatus.UNPAID.value)
            .order_by(Invoice.issue_date, Invoice.id)
            .all()
        )

    def lock_many(self, invoice_ids: Sequence[int]) -> List[Invoice]:
        """
        Fetch invoices with a row lock (SELECT ... FOR UPDATE).

        Rows are locked in primary key order so concurrent payments over
        overlapping selections cannot deadlock. Callers reorder as needed.
        """
        return (
            self.db.query(Invoice)
            .filter(Invoice.id.in_(list(invoice_ids)))
            .order_by(Invoice.id)
            .with_for_update()
            .populate_existing()
            .all()
        )


class ClientRepository:
    """Repository for clients"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, client_id: int) -> Optional[Client]:
        return self.db.get(Client, client_id)

    def find_by_name_substring(self, name: str, limit: int = 50) -> List[Client]:
        """Case-insensitive substring match on the client name"""
        return (
            self.db.query(Client)
            .filter(Client.name.icontains(name, autoescape=True))
            .order_by(Client.name, Client.id)
            .limit(limit)
            .all()
        )

    def lock(self, client_id: int) -> Optional[Client]:
        """Fetch a client with a row lock so its credit balance cannot change underneath us"""
        return (
            self.db.query(Client)
            .filter(Client.id == client_id)
            .with_for_update()
            .populate_existing()
            .first()
        )


class PaymentRepository:
    """Repository for payments and their details"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Payment).options(
            selectinload(Payment.details).joinedload(PaymentDetail.invoice).joinedload(Invoice.client)
        )

    def add(self, payment: Payment) -> Payment:
        """Persist a payment built with Payment.create"""
        self.db.add(payment)
        self.db.flush()  # Get ID without committing
        return payment

    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        return self._query().filter(Payment.id == payment_id).first()

    def get_by_receipt_number(self, receipt_number: str) -> List[Payment]:
        return self._query().filter(Payment.receipt_number == receipt_number).order_by(Payment.id).all()

    def list_filtered(
        self,
        client_name: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Payment]:
        """Payments matching a client name substring and an inclusive date range"""
        query = self._query()

        if client_name:
            matching_ids = (
                select(PaymentDetail.payment_id)
                .join(Invoice, Invoice.id == PaymentDetail.invoice_id)
                .join(Client, Client.id == Invoice.client_id)
                .where(Client.name.icontains(client_name, autoescape=True))
            )
            query = query.filter(Payment.id.in_(matching_ids))
        if date_from is not None:
            query = query.filter(Payment.payment_date >= date_from)
        if date_to is not None:
            query = query.filter(Payment.payment_date <= date_to)

        return query.order_by(Payment.id).all()


def to_payment_record(payment: Payment) -> PaymentRecord:
    """Map an ORM payment to the domain record used by receipt consolidation"""
    client = payment.details[0].invoice.client if payment.details else None
    return PaymentRecord(
        payment_id=payment.id,
        payment_date=payment.payment_date,
        amount=payment.amount,
        method=method_from_kind(payment.method, reference=payment.reference, amount=payment.amount),
        reference=payment.reference,
        receipt_number=payment.receipt_number,
        client_id=client.id if client else None,
        client_name=client.name if client else None,
        details=[PaymentLine(invoice_id=d.invoice_id, amount=d.amount) for d in payment.details],
    )
