"""Corporate Invoice API Routes

Invoices as seen by the corporate account that owns them.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.auth import get_identity
from src.api.error import ClientError
from src.api.schemas.response import ApiResponse, success_response
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.pdf_service import PdfService
from src.app.use_cases.common import PaymentIntentResponseDTO
from src.app.use_cases.invoices.dtos import InvoiceDTO, InvoiceListResponseDTO
from src.app.use_cases.invoices.create_invoice_payment_intent import CreateInvoicePaymentIntent
from src.app.use_cases.invoices.download_invoice_pdf import DownloadInvoicePdf
from src.app.use_cases.invoices.get_corporate_invoice import GetCorporateInvoice
from src.app.use_cases.invoices.list_corporate_invoices import ListCorporateInvoices
from src.adapter.repositories.corporate_invoice_repository import SqlAlchemyCorporateInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_payment_gateway, get_pdf_service, get_session
from src.domain.corporate_invoice import InvoiceStatus
from src.domain.identity import Identity

router = APIRouter(prefix="/corporate/invoices", tags=["Corporate"])


@router.get("", response_model=ApiResponse[InvoiceListResponseDTO])
async def list_corporate_invoices(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    status: Optional[InvoiceStatus] = Query(None),
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    List the signed-in corporate account's invoices.
    """
    use_case = ListCorporateInvoices(SqlAlchemyCorporateInvoiceRepository(session))
    result = await use_case.execute(identity, page=page, limit=limit, status=status)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.get(
    "/{invoice_id}",
    response_model=ApiResponse[InvoiceDTO],
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Invoice belongs to another account"},
        404: {"description": "Invoice not found"},
    }
)
async def get_corporate_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    use_case = GetCorporateInvoice(SqlAlchemyCorporateInvoiceRepository(session))
    result = await use_case.execute(invoice_id, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.get(
    "/{invoice_id}/download",
    responses={
        200: {
            "description": "PDF file",
            "content": {"application/pdf": {}}
        },
        403: {"description": "Invoice belongs to another account"},
        404: {"description": "Invoice not found"},
    }
)
async def download_invoice_pdf(
    invoice_id: str,
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
    identity: Identity = Depends(get_identity),
):
    """
    Download an invoice as a PDF file.

    **Returns:**
    - 200: PDF file as binary response
    - 403: Invoice belongs to another account
    - 404: Invoice not found
    """
    use_case = DownloadInvoicePdf(SqlAlchemyCorporateInvoiceRepository(session), pdf_service)
    result = await use_case.execute(invoice_id, identity)

    if result.is_err():
        raise ClientError(result.error)

    return Response(
        content=result.value.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename={result.value.filename}"
        }
    )


@router.get(
    "/{invoice_id}/payment-intent",
    response_model=ApiResponse[PaymentIntentResponseDTO],
    responses={
        409: {"description": "Invoice already paid or not issued yet"},
        502: {"description": "Payment provider unavailable"},
    }
)
async def create_invoice_payment_intent(
    invoice_id: str,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    identity: Identity = Depends(get_identity),
):
    """
    Create (or reuse) the card payment intent of an invoice.

    The amount is the invoice total including VAT. Repeated calls return
    the same intent.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = CreateInvoicePaymentIntent(
        uow,
        SqlAlchemyCorporateInvoiceRepository(session),
        payment_gateway,
        currency=ApplicationConfig.CURRENCY,
    )
    result = await use_case.execute(invoice_id, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)
