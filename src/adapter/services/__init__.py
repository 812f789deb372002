from .unit_of_work import SqlAlchemyUnitOfWork
from .email_service import (
    LoggingEmailService,
    HttpEmailService,
    create_email_service,
)
from .payment_gateway import StripePaymentGateway
from .pdf_service import ReportLabPdfService

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingEmailService",
    "HttpEmailService",
    "create_email_service",
    "StripePaymentGateway",
    "ReportLabPdfService",
]
