"""Integration tests for the repositories"""

from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
from receipts_gateway.domain.models import Cash
from receipts_gateway.infrastructure.database.models import Payment
from receipts_gateway.infrastructure.database.repositories import (
    ClientRepository,
    InvoiceRepository,
    PaymentRepository,
    to_payment_record,
)


def test_invoice_find_by_id(db: Session, invoice_a):
    repo = InvoiceRepository(db)

    assert repo.find_by_id(invoice_a.id).balance == Decimal("100.00")
    assert repo.find_by_id(404) is None


def test_lock_many_returns_primary_key_order(db: Session, invoice_a, invoice_b):
    locked = InvoiceRepository(db).lock_many([invoice_b.id, invoice_a.id, 404])

    assert [i.id for i in locked] == [invoice_a.id, invoice_b.id]


def test_find_unpaid_by_client_oldest_first(db: Session, make_customer, make_invoice):
    owner = make_customer()
    newer = make_invoice(owner, "10.00", issue_date=date(2026, 9, 15))
    older = make_invoice(owner, "20.00", issue_date=date(2026, 8, 1))
    settled = make_invoice(owner, "5.00")
    settled.apply_payment(Decimal("5.00"))
    db.commit()

    unpaid = InvoiceRepository(db).find_unpaid_by_client(owner.id)

    assert [i.id for i in unpaid] == [older.id, newer.id]


def test_client_lock(db: Session, customer):
    repo = ClientRepository(db)

    assert repo.lock(customer.id).credit_balance == Decimal("200.00")
    assert repo.lock(404) is None


def test_payment_list_filtered_and_record(db: Session, customer, invoice_a):
    payment = Payment.create(
        amount=Decimal("12.34"), method=Cash(), invoice=invoice_a, payment_date=date(2026, 10, 2), reference="Desk 1"
    )
    payment.receipt_number = "00000042"
    repo = PaymentRepository(db)
    repo.add(payment)
    db.commit()

    assert repo.list_filtered(date_from=date(2026, 10, 3)) == []
    listed = repo.list_filtered(client_name="acme", date_to=date(2026, 10, 2))
    assert [p.id for p in listed] == [payment.id]

    record = to_payment_record(listed[0])
    assert record.receipt_number == "00000042"
    assert record.client_id == customer.id
    assert record.method.kind == "CASH"
    assert [line.invoice_id for line in record.details] == [invoice_a.id]
