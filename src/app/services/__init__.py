from .unit_of_work import UnitOfWork
from .email_service import EmailService
from .payment_gateway import PaymentGateway
from .pdf_service import PdfService

__all__ = [
    "UnitOfWork",
    "EmailService",
    "PaymentGateway",
    "PdfService",
]
