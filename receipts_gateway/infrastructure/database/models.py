"""SQLAlchemy ORM models for the invoice/client ledger and payment records"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, String, BigInteger, Date, DateTime, Integer, ForeignKey, Numeric, Text
from sqlalchemy.orm import declarative_base, relationship, validates
from sqlalchemy.sql import func

from receipts_gateway.config import settings
from receipts_gateway.domain.exceptions import ValidationError
from receipts_gateway.domain.models import InvoiceStatus, PaymentMethod, METHODS_BY_KIND

Base = declarative_base()

MONEY = Numeric(12, 2)


class Client(Base):
    """Client account holding a credit balance"""

    __tablename__ = "client"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, index=True)
    credit_balance = Column(MONEY, nullable=False, default=Decimal("0.00"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    invoices = relationship("Invoice", back_populates="client")

    @validates("credit_balance")
    def _validate_credit_balance(self, key, value):
        if value is not None and value < 0:
            raise ValidationError("Credit balance cannot be negative")
        return value

    def draw_credit(self, amount: Decimal) -> None:
        """Spend part of the credit balance. Never leaves it negative."""
        if amount <= 0:
            raise ValidationError("Credit draw must be positive")
        if amount > self.credit_balance:
            raise ValidationError(f"Credit draw {amount} exceeds balance {self.credit_balance}")
        self.credit_balance = self.credit_balance - amount


class Invoice(Base):
    """Billable obligation with an outstanding balance"""

    __tablename__ = "invoice"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("client.id"), nullable=False, index=True)
    description = Column(Text, nullable=True)
    issue_date = Column(Date, nullable=False, default=date.today)
    balance = Column(MONEY, nullable=False)
    status = Column(String(10), nullable=False, default=InvoiceStatus.UNPAID.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    client = relationship("Client", back_populates="invoices")

    @validates("balance")
    def _validate_balance(self, key, value):
        if value is not None and value < 0:
            raise ValidationError("Invoice balance cannot be negative")
        return value

    def apply_payment(self, amount: Decimal) -> None:
        """Reduce the outstanding balance; the invoice becomes PAID when it reaches zero"""
        if amount <= 0:
            raise ValidationError("Applied amount must be positive")
        if amount > self.balance:
            raise ValidationError(f"Applied amount {amount} exceeds invoice balance {self.balance}")
        self.balance = self.balance - amount
        if self.balance == 0:
            self.status = InvoiceStatus.PAID.value


class Payment(Base):
    """Funds received and applied to invoices through its details"""

    __tablename__ = "payment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_date = Column(Date, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    method = Column(String(20), nullable=False)
    reference = Column(String(500), nullable=True)
    receipt_number = Column(String(50), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    details = relationship(
        "PaymentDetail",
        cascade="all, delete-orphan",
        order_by="PaymentDetail.id",
    )

    @classmethod
    def create(
        cls,
        amount: Decimal,
        method: PaymentMethod,
        invoice: "Invoice",
        payment_date: date,
        reference: Optional[str] = None,
    ) -> "Payment":
        """Build a payment with its single detail line for `invoice`"""
        payment = cls(
            payment_date=payment_date,
            amount=amount,
            method=method.kind,
            reference=reference,
        )
        payment.details.append(PaymentDetail(invoice_id=invoice.id, amount=amount))
        return payment

    @validates("amount")
    def _validate_amount(self, key, value):
        if value is None or value <= 0:
            raise ValidationError("Payment amount must be greater than zero")
        return value

    @validates("method")
    def _validate_method(self, key, value):
        if value not in METHODS_BY_KIND:
            raise ValidationError(f"Unknown payment method: {value}")
        return value

    @validates("reference")
    def _validate_reference(self, key, value):
        if value is not None and len(value) > settings.reference_max_length:
            raise ValidationError(f"Reference exceeds {settings.reference_max_length} characters")
        return value


class PaymentDetail(Base):
    """Amount of a payment applied to one invoice"""

    __tablename__ = "payment_detail"

    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_id = Column(Integer, ForeignKey("payment.id", ondelete="CASCADE"), nullable=False, index=True)
    invoice_id = Column(Integer, ForeignKey("invoice.id"), nullable=False, index=True)
    amount = Column(MONEY, nullable=False)

    invoice = relationship("Invoice", viewonly=True)

    @validates("amount")
    def _validate_amount(self, key, value):
        if value is None or value <= 0:
            raise ValidationError("Detail amount must be greater than zero")
        return value


class ReceiptCounter(Base):
    """Named counter row; locked while a receipt number is issued"""

    __tablename__ = "receipt_counter"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)
    current_value = Column(BigInteger, nullable=False, default=0)
