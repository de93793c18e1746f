"""Receipt numbering - monotonic receipt numbers from a locked counter row"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from receipts_gateway.config import settings
from receipts_gateway.domain.numbering import format_receipt_number
from receipts_gateway.infrastructure.database.models import ReceiptCounter

logger = logging.getLogger(__name__)

RECEIPT_SEQUENCE = "receipt"


class ReceiptNumberService:
    """
    Issues strictly increasing receipt numbers.

    The counter row is read with SELECT ... FOR UPDATE, so concurrent
    combined payments serialize on it until their transaction ends. The
    increment commits or rolls back with the caller's transaction; this
    service never commits on its own.
    """

    def __init__(self, db: Session, sequence_name: str = RECEIPT_SEQUENCE, width: int | None = None):
        self.db = db
        self.sequence_name = sequence_name
        self.width = width or settings.receipt_number_width

    def _locked_counter(self):
        return self.db.execute(
            select(ReceiptCounter)
            .where(ReceiptCounter.name == self.sequence_name)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def next_number(self) -> str:
        """Lock, increment and return the next receipt number"""
        # Pending caller changes must not end up inside the savepoint below
        self.db.flush()
        counter = self._locked_counter()

        if counter is None:
            # First use: another transaction may create the row concurrently
            savepoint = self.db.begin_nested()
            try:
                counter = ReceiptCounter(name=self.sequence_name, current_value=1)
                self.db.add(counter)
                self.db.flush()
                savepoint.commit()
                return self._issue(counter.current_value)
            except IntegrityError:
                savepoint.rollback()
                logger.debug("receipt_counter_race_retry", extra={"sequence_name": self.sequence_name})
                counter = self._locked_counter()

        counter.current_value += 1
        self.db.flush()
        return self._issue(counter.current_value)

    def current_number(self) -> str | None:
        """Last issued receipt number, without incrementing"""
        value = self.db.execute(
            select(ReceiptCounter.current_value).where(ReceiptCounter.name == self.sequence_name)
        ).scalar_one_or_none()
        return format_receipt_number(value, self.width) if value else None

    def _issue(self, value: int) -> str:
        number = format_receipt_number(value, self.width)
        logger.debug("receipt_number_issued", extra={"sequence_name": self.sequence_name, "receipt_number": number})
        return number
