"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from receipts_gateway.infrastructure.database.session import get_db
from receipts_gateway.services.invoices import InvoiceSelectionService
from receipts_gateway.services.payments import PaymentService
from receipts_gateway.services.receipts import ReceiptService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Provide payment allocation engine bound to the request session"""
    return PaymentService(db)


def get_receipt_service(db: Session = Depends(get_db)) -> ReceiptService:
    """Provide receipt query service bound to the request session"""
    return ReceiptService(db)


def get_invoice_selection_service(db: Session = Depends(get_db)) -> InvoiceSelectionService:
    """Provide invoice selection service bound to the request session"""
    return InvoiceSelectionService(db)
