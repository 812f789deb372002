"""Invoice e-mail delivery shared by resend, send and monthly generation"""

import logging
from src.app.services.email_service import EmailService
from src.app.services.pdf_service import PdfService
from src.domain.corporate_invoice import CorporateInvoice
from src.domain.user import User

logger = logging.getLogger(__name__)


async def email_invoice(
    invoice: CorporateInvoice,
    owner: User,
    email_service: EmailService,
    pdf_service: PdfService,
) -> bool:
    """Render the invoice and e-mail it to its owner, False if the e-mail was not sent"""
    pdf = pdf_service.generate_corporate_invoice(invoice)
    sent = await email_service.send_invoice(
        invoice,
        recipient_email=owner.email,
        recipient_name=owner.name,
        pdf=pdf,
    )
    if not sent:
        logger.warning(f"Invoice {invoice.invoice_number} e-mail to {owner.email} failed")
    return sent
