"""Invoice selection support for the payment form"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from receipts_gateway.domain.exceptions import NotFound, ValidationError
from receipts_gateway.domain.models import ZERO, selectable_methods
from receipts_gateway.infrastructure.database.models import Client, Invoice
from receipts_gateway.infrastructure.database.repositories import ClientRepository, InvoiceRepository


@dataclass
class PaymentForm:
    """What a caller needs to offer a client a combined payment"""

    client: Client
    invoices: List[Invoice]
    total_owed: Decimal
    max_credit_applicable: Decimal
    methods: List[str]


class InvoiceSelectionService:
    def __init__(self, db: Session):
        self.invoices = InvoiceRepository(db)
        self.clients = ClientRepository(db)

    def get_client(self, client_id: int) -> Client:
        client = self.clients.find_by_id(client_id)
        if client is None:
            raise NotFound(f"Client not found: {client_id}")
        return client

    def search_clients(self, name: str) -> List[Client]:
        name = (name or "").strip()
        if not name:
            raise ValidationError("client name is required")
        return self.clients.find_by_name_substring(name)

    def find_unpaid_invoices(self, client_id: int) -> List[Invoice]:
        self.get_client(client_id)
        return self.invoices.find_unpaid_by_client(client_id)

    def payment_form(self, client_id: int) -> PaymentForm:
        """
        Unpaid invoices with the totals the form shows.

        The credit balance that can be applied is capped at the total owed,
        since overpayment is rejected.
        """
        client = self.get_client(client_id)
        invoices = self.invoices.find_unpaid_by_client(client_id)
        total_owed = sum((invoice.balance for invoice in invoices), ZERO)

        return PaymentForm(
            client=client,
            invoices=invoices,
            total_owed=total_owed,
            max_credit_applicable=min(client.credit_balance, total_owed),
            methods=selectable_methods(),
        )
