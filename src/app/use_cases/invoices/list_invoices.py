"""
ListInvoices Use Case

Back-office invoice listing with filters and pagination.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.access_control import require_admin
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.app.use_cases.common import build_pagination, page_offset
from src.domain.corporate_invoice import InvoiceStatus
from src.domain.identity import Identity
from .dtos import InvoiceDTO, InvoiceListResponseDTO


class ListInvoices:
    """
    Use case: Admin invoice listing

    Invoices are ordered by created_at DESC; each carries recomputed totals.
    """

    def __init__(self, invoice_repo: CorporateInvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(
        self,
        identity: Identity,
        page: int = 1,
        limit: int = 20,
        status: Optional[InvoiceStatus] = None,
        user_id: Optional[str] = None,
    ) -> Result[InvoiceListResponseDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        invoices, total = await self.invoice_repo.list_invoices(
            status=status,
            corporate_user_id=user_id,
            limit=limit,
            offset=page_offset(page, limit),
        )

        return Return.ok(
            InvoiceListResponseDTO(
                invoices=[InvoiceDTO.from_invoice(invoice) for invoice in invoices],
                pagination=build_pagination(page, limit, total),
            )
        )
