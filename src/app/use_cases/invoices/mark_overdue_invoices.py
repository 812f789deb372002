"""MarkOverdueInvoices Use Case"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.corporate_invoice import InvoiceStatus, transition_invoice
from .dtos import MarkOverdueResultDTO

logger = logging.getLogger(__name__)


class MarkOverdueInvoices:
    """
    Use Case: Flag sent invoices past their due date as overdue

    Safe to re-run: overdue invoices are no longer candidates.
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: CorporateInvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, now: Optional[datetime] = None) -> Result[MarkOverdueResultDTO]:
        now = now or datetime.utcnow()
        try:
            marked = []
            for invoice in await self.invoice_repo.list_past_due(now):
                if not invoice.is_overdue(now):
                    continue
                transition_invoice(invoice, InvoiceStatus.OVERDUE, at=now)
                await self.invoice_repo.update(invoice)
                marked.append(invoice.invoice_number)

            if marked:
                await self.uow.commit()
                logger.info(f"Marked {len(marked)} invoice(s) overdue")

            return Return.ok(MarkOverdueResultDTO(marked=marked))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MARK_OVERDUE_FAILED",
                    message="Failed to mark overdue invoices",
                    reason=str(e),
                )
            )
