"""GET /v1/receipts - consolidated receipt listing and detail"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from receipts_gateway.api.v1.schemas import ReceiptListResponse, ReceiptResponse
from receipts_gateway.api.dependencies import get_receipt_service
from receipts_gateway.domain.exceptions import NotFound, ValidationError
from receipts_gateway.services.receipts import ReceiptService

router = APIRouter()


@router.get("/receipts", response_model=ReceiptListResponse)
def list_receipts(
    client_name: Optional[str] = Query(None, description="Client name substring"),
    date_from: Optional[date] = Query(None, description="First payment date (inclusive)"),
    date_to: Optional[date] = Query(None, description="Last payment date (inclusive)"),
    service: ReceiptService = Depends(get_receipt_service),
):
    """
    List receipts, newest first.

    Returns:
        One receipt per receipt number; payments without a number appear on their own
    """
    try:
        receipts = service.list_receipts(client_name, date_from, date_to)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ReceiptListResponse(receipts=[ReceiptResponse.model_validate(r) for r in receipts])


@router.get("/receipts/by-payment/{payment_id}", response_model=ReceiptResponse)
def get_receipt_by_payment(payment_id: int, service: ReceiptService = Depends(get_receipt_service)):
    """Receipt for a single payment row"""
    try:
        receipt = service.get_receipt_by_payment_id(payment_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ReceiptResponse.model_validate(receipt)


@router.get("/receipts/{receipt_number}", response_model=ReceiptResponse)
def get_receipt(receipt_number: str, service: ReceiptService = Depends(get_receipt_service)):
    """Consolidated receipt over all payments sharing the number"""
    try:
        receipt = service.get_receipt_by_number(receipt_number)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ReceiptResponse.model_validate(receipt)
