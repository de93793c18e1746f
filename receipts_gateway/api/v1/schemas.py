"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TenderMethod = Literal["CASH", "TRANSFER", "CARD"]


class CombinedPaymentRequest(BaseModel):
    """Request body for POST /v1/payments/combined"""

    invoice_ids: List[int] = Field(default_factory=list, description="Invoices in allocation priority order")
    total_amount: Decimal = Field(Decimal("0"), description="Cash, transfer or card amount")
    credit_balance_applied: Decimal = Field(Decimal("0"), description="Amount drawn from the client's credit balance")
    method: Optional[TenderMethod] = Field(None, description="Required when total_amount > 0")
    reference: Optional[str] = Field(None, description="Voucher or transfer reference")


class CombinedPaymentResponse(BaseModel):
    """Response for POST /v1/payments/combined"""

    receipt_number: str


class PaymentDetailSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invoice_id: int
    amount: Decimal


class PaymentResponse(BaseModel):
    """Response for GET /v1/payments/{payment_id}"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    payment_date: date
    amount: Decimal
    method: str
    reference: Optional[str] = None
    receipt_number: Optional[str] = None
    details: List[PaymentDetailSchema]


class ReceiptLineSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_id: int
    invoice_id: int
    amount: Decimal
    method: str
    reference: Optional[str] = None


class ReceiptResponse(BaseModel):
    """Consolidated receipt"""

    model_config = ConfigDict(from_attributes=True)

    key: str
    number: Optional[str] = None
    receipt_date: date
    total_amount: Decimal
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    invoice_ids: List[int]
    methods: List[str]
    payment_ids: List[int]
    lines: List[ReceiptLineSchema]


class ReceiptListResponse(BaseModel):
    """Response for GET /v1/receipts"""

    receipts: List[ReceiptResponse]


class ClientSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    credit_balance: Decimal


class ClientSearchResponse(BaseModel):
    """Response for GET /v1/clients"""

    clients: List[ClientSchema]


class InvoiceSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: Optional[str] = None
    issue_date: date
    balance: Decimal
    status: str


class PaymentFormResponse(BaseModel):
    """Response for GET /v1/clients/{client_id}/payment-form"""

    model_config = ConfigDict(from_attributes=True)

    client: ClientSchema
    invoices: List[InvoiceSchema]
    total_owed: Decimal
    max_credit_applicable: Decimal
    methods: List[str]
