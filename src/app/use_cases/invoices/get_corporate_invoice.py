"""GetCorporateInvoice Use Case"""

from libs.result import Result, Return
from src.app import errors
from src.app.access_control import check_invoice_read, require_authenticated
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.domain.identity import Admin, Identity
from .dtos import InvoiceDTO


class GetCorporateInvoice:
    """
    Use Case: Read one invoice (owner or admin)

    Admin notes are only returned to admins.
    """

    def __init__(self, invoice_repo: CorporateInvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str, identity: Identity) -> Result[InvoiceDTO]:
        denied = require_authenticated(identity)
        if denied:
            return Return.err(denied)

        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(errors.not_found(errors.INVOICE_NOT_FOUND, "Invoice", invoice_id))

        denied = check_invoice_read(identity, invoice)
        if denied:
            return Return.err(denied)

        return Return.ok(
            InvoiceDTO.from_invoice(invoice, include_admin_notes=isinstance(identity, Admin))
        )
