"""POST /v1/payments/combined - register a payment across several invoices"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from receipts_gateway.api.v1.schemas import CombinedPaymentRequest, CombinedPaymentResponse, PaymentResponse
from receipts_gateway.api.dependencies import get_payment_service, get_request_id
from receipts_gateway.domain.exceptions import (
    ExcessPayment,
    InsufficientCreditBalance,
    NotFound,
    ValidationError,
)
from receipts_gateway.domain.models import method_from_kind
from receipts_gateway.services.payments import PaymentService

router = APIRouter()


@router.post("/payments/combined", response_model=CombinedPaymentResponse, status_code=201)
def register_combined_payment(
    request_body: CombinedPaymentRequest,
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Register a combined payment and issue its receipt.

    Funds (total_amount + credit_balance_applied) are applied to the
    invoices in the order given. Resubmitting the same body issues a
    second receipt.
    """
    request_id = get_request_id(request)
    method = method_from_kind(request_body.method, reference=request_body.reference) if request_body.method else None

    try:
        receipt_number = service.register_combined_payment(
            invoice_ids=request_body.invoice_ids,
            total_amount=request_body.total_amount,
            credit_balance_applied=request_body.credit_balance_applied,
            method=method,
            reference=request_body.reference,
            request_id=request_id,
        )
        return CombinedPaymentResponse(receipt_number=receipt_number)

    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    except InsufficientCreditBalance as e:
        raise HTTPException(status_code=409, detail=str(e))

    except (ValidationError, ExcessPayment) as e:
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, service: PaymentService = Depends(get_payment_service)):
    """Retrieve a single payment row with its details"""
    try:
        payment = service.get_payment(payment_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return PaymentResponse.model_validate(payment)
