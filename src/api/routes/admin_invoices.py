"""Back-office Corporate Invoice API Routes

Monthly invoice generation, overdue sweep and manual status changes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.auth import get_identity
from src.api.error import ClientError
from src.api.schemas.invoice_request import UpdateInvoiceRequestSchema
from src.api.schemas.response import ApiResponse, success_response
from src.app.access_control import require_admin
from src.app.services.email_service import EmailService
from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoices.dtos import (
    GenerateMonthlyInvoicesCommandDTO,
    InvoiceDTO,
    InvoiceListResponseDTO,
    MarkOverdueResultDTO,
    MonthlyInvoicingResultDTO,
    ResendInvoiceResultDTO,
    UpdateInvoiceCommandDTO,
)
from src.app.use_cases.invoices.generate_monthly_invoices import GenerateMonthlyInvoices
from src.app.use_cases.invoices.list_invoices import ListInvoices
from src.app.use_cases.invoices.mark_overdue_invoices import MarkOverdueInvoices
from src.app.use_cases.invoices.resend_invoice import ResendInvoice
from src.app.use_cases.invoices.update_invoice import UpdateInvoice
from src.adapter.repositories.corporate_invoice_repository import SqlAlchemyCorporateInvoiceRepository
from src.adapter.repositories.order_repository import SqlAlchemyOrderRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_email_service, get_pdf_service, get_session
from src.domain.corporate_invoice import InvoiceStatus
from src.domain.identity import Identity

router = APIRouter(prefix="/admin/invoices", tags=["Admin"])


@router.get("", response_model=ApiResponse[InvoiceListResponseDTO])
async def list_invoices(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[InvoiceStatus] = Query(None, description="Filter by status"),
    user_id: Optional[str] = Query(None, alias="userId", description="Filter by corporate account"),
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    List corporate invoices, newest period first.
    """
    use_case = ListInvoices(SqlAlchemyCorporateInvoiceRepository(session))
    result = await use_case.execute(identity, page=page, limit=limit, status=status, user_id=user_id)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.post(
    "/generate",
    response_model=ApiResponse[MonthlyInvoicingResultDTO],
    status_code=status.HTTP_200_OK,
)
async def generate_monthly_invoices(
    request: GenerateMonthlyInvoicesCommandDTO,
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service),
    pdf_service: PdfService = Depends(get_pdf_service),
    identity: Identity = Depends(get_identity),
):
    """
    Invoice every corporate account for a calendar month.

    Accounts already invoiced for the month and accounts without orders are
    skipped. Invoices whose e-mail could not be sent stay in `draft` and are
    listed in `email_failed`.

    **Example request:**
    ```json
    {"year": 2024, "month": 1}
    ```
    """
    denied = require_admin(identity)
    if denied:
        raise ClientError(denied)

    uow = SqlAlchemyUnitOfWork(session)
    use_case = GenerateMonthlyInvoices(
        uow,
        SqlAlchemyCorporateInvoiceRepository(session),
        SqlAlchemyOrderRepository(session),
        SqlAlchemyUserRepository(session),
        email_service,
        pdf_service,
        vat_rate=ApplicationConfig.INVOICE_VAT_RATE,
        payment_term_days=ApplicationConfig.INVOICE_PAYMENT_TERM_DAYS,
    )
    result = await use_case.execute(request)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(
        result.value, f"{len(result.value.created)} facture(s) générée(s)"
    )


@router.post("/mark-overdue", response_model=ApiResponse[MarkOverdueResultDTO])
async def mark_overdue_invoices(
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Mark every sent invoice past its due date as `overdue`.
    """
    denied = require_admin(identity)
    if denied:
        raise ClientError(denied)

    uow = SqlAlchemyUnitOfWork(session)
    use_case = MarkOverdueInvoices(uow, SqlAlchemyCorporateInvoiceRepository(session))
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.patch(
    "/{invoice_id}",
    response_model=ApiResponse[InvoiceDTO],
    responses={
        404: {"description": "Invoice not found"},
        409: {
            "description": "Status change not allowed",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": {
                            "code": "ALREADY_PAID",
                            "message": "Invoice BFC-2024-01-0001 is already paid"
                        }
                    }
                }
            }
        },
        502: {"description": "Invoice e-mail could not be sent"},
    }
)
async def update_invoice(
    invoice_id: str,
    request: UpdateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service),
    pdf_service: PdfService = Depends(get_pdf_service),
    identity: Identity = Depends(get_identity),
):
    """
    Update an invoice's status or notes.

    Allowed status changes: draft → sent, sent → paid | overdue,
    overdue → paid. Sending e-mails the invoice first and only changes
    the status once the e-mail went out.
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = UpdateInvoiceCommandDTO(
        invoice_id=invoice_id,
        status=request.status,
        paid_date=request.paid_date,
        notes=request.notes,
        admin_notes=request.admin_notes,
    )

    use_case = UpdateInvoice(
        uow,
        SqlAlchemyCorporateInvoiceRepository(session),
        SqlAlchemyUserRepository(session),
        email_service,
        pdf_service,
        payment_term_days=ApplicationConfig.INVOICE_PAYMENT_TERM_DAYS,
    )
    result = await use_case.execute(command, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, "Facture mise à jour")


@router.post("/{invoice_id}/resend", response_model=ApiResponse[ResendInvoiceResultDTO])
async def resend_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service),
    pdf_service: PdfService = Depends(get_pdf_service),
    identity: Identity = Depends(get_identity),
):
    """
    E-mail an invoice again to its corporate account. The status is unchanged.
    """
    use_case = ResendInvoice(
        SqlAlchemyCorporateInvoiceRepository(session),
        SqlAlchemyUserRepository(session),
        email_service,
        pdf_service,
    )
    result = await use_case.execute(invoice_id, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, f"Facture renvoyée à {result.value.recipient}")
