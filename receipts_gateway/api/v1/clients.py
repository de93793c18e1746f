"""GET /v1/clients - client search and payment form data"""

from fastapi import APIRouter, Depends, HTTPException, Query

from receipts_gateway.api.v1.schemas import ClientSchema, ClientSearchResponse, PaymentFormResponse
from receipts_gateway.api.dependencies import get_invoice_selection_service
from receipts_gateway.domain.exceptions import NotFound, ValidationError
from receipts_gateway.services.invoices import InvoiceSelectionService

router = APIRouter()


@router.get("/clients", response_model=ClientSearchResponse)
def search_clients(
    name: str = Query(..., description="Client name substring"),
    service: InvoiceSelectionService = Depends(get_invoice_selection_service),
):
    try:
        clients = service.search_clients(name)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ClientSearchResponse(clients=[ClientSchema.model_validate(c) for c in clients])


@router.get("/clients/{client_id}/payment-form", response_model=PaymentFormResponse)
def get_payment_form(
    client_id: int,
    service: InvoiceSelectionService = Depends(get_invoice_selection_service),
):
    """
    Data for choosing invoices to pay.

    Returns:
        Unpaid invoices, total owed, the credit balance that can be applied,
        and the selectable (real tender) payment methods
    """
    try:
        form = service.payment_form(client_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return PaymentFormResponse.model_validate(form)
