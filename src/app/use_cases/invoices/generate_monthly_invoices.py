"""GenerateMonthlyInvoices Use Case

Bills corporate accounts for the orders of a calendar month.
Used by the admin endpoint and the monthly invoicing worker.
"""

import logging
from calendar import monthrange
from datetime import date, datetime
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.user_repository import UserRepository
from src.app.services.email_service import EmailService
from src.app.services.pdf_service import PdfService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.corporate_invoice import (
    DEFAULT_VAT_RATE,
    CorporateInvoice,
    InvoiceItem,
    InvoiceStatus,
    build_invoice_number,
    refresh_totals,
    transition_invoice,
)
from src.domain.user import User
from .dtos import GenerateMonthlyInvoicesCommandDTO, MonthlyInvoicingResultDTO
from .mailing import email_invoice

logger = logging.getLogger(__name__)


def billing_period(year: int, month: int):
    """Return (first day, last day, start of next month) of a billing month"""
    first = date(year, month, 1)
    last = date(year, month, monthrange(year, month)[1])
    next_start = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return first, last, next_start


class GenerateMonthlyInvoices:
    """
    Use Case: Generate the monthly invoices of every corporate account

    Business Rules:
    1. One invoice per corporate user and month (existing periods are skipped)
    2. Only non-cancelled orders created in the month are billed
    3. Users without billable orders get no invoice
    4. Invoice number is BFC-YYYY-MM-NNNN, sequential within the month
    5. Due date is issue date + payment term
    6. The invoice is marked sent only once the e-mail went out, otherwise it stays draft
    7. A failure for one user does not stop the run

    Flow (per corporate user):
    1. Skip if already invoiced
    2. Collect billable orders, skip if none
    3. Create draft with items and totals, commit
    4. E-mail the invoice, mark sent and commit on success
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: CorporateInvoiceRepository,
        order_repo: OrderRepository,
        user_repo: UserRepository,
        email_service: EmailService,
        pdf_service: PdfService,
        vat_rate: Decimal = DEFAULT_VAT_RATE,
        payment_term_days: int = 30,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.order_repo = order_repo
        self.user_repo = user_repo
        self.email_service = email_service
        self.pdf_service = pdf_service
        self.vat_rate = vat_rate
        self.payment_term_days = payment_term_days

    async def execute(self, command: GenerateMonthlyInvoicesCommandDTO) -> Result[MonthlyInvoicingResultDTO]:
        """
        Execute monthly invoicing

        Args:
            command: Billing year and month

        Returns:
            Result[MonthlyInvoicingResultDTO]: Per-user outcome of the run
        """
        result = MonthlyInvoicingResultDTO(year=command.year, month=command.month)

        try:
            users = await self.user_repo.list_corporate()
        except Exception as e:
            return Return.err(
                Error(
                    code="GENERATE_INVOICES_FAILED",
                    message="Failed to load corporate accounts",
                    reason=str(e),
                )
            )

        for user in users:
            try:
                await self._invoice_user(user, command.year, command.month, result)
            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Invoicing failed for user {user.id}: {e}")
                result.failed.append(user.id)

        logger.info(
            f"Monthly invoicing {command.year}-{command.month:02d}: "
            f"{len(result.created)} created, {len(result.sent)} sent, "
            f"{len(result.email_failed)} left in draft, {len(result.failed)} failed"
        )
        return Return.ok(result)

    async def _invoice_user(
        self, user: User, year: int, month: int, result: MonthlyInvoicingResultDTO
    ) -> None:
        # Step 1: Skip already invoiced periods
        if await self.invoice_repo.exists_for_period(user.id, year, month):
            result.skipped_existing += 1
            return

        # Step 2: Collect billable orders
        period_start, period_end, next_start = billing_period(year, month)
        orders = await self.order_repo.list_billable(
            user.id, datetime.combine(period_start, datetime.min.time()), next_start
        )
        if not orders:
            result.skipped_empty += 1
            return

        # Step 3: Create draft
        items = [
            InvoiceItem(
                order_id=order.id,
                order_number=order.order_number,
                order_date=order.created_at,
                amount=order.total_amount,
                description=f"Commande {order.order_number} - "
                            f"{sum(item.quantity for item in order.line_items())} article(s)",
            )
            for order in orders
        ]
        sequence = await self.invoice_repo.count_for_period(year, month) + 1

        invoice = CorporateInvoice(
            invoice_number=build_invoice_number(year, month, sequence),
            corporate_user_id=user.id,
            company_name=user.company_name or user.name,
            period_start=period_start,
            period_end=period_end,
            period_month=month,
            period_year=year,
            items=[item.model_dump(mode="json") for item in items],
            vat_rate=self.vat_rate,
            status=InvoiceStatus.DRAFT,
        )
        refresh_totals(invoice)

        invoice = await self.invoice_repo.create(invoice)
        await self.uow.commit()
        result.created.append(invoice.invoice_number)

        # Step 4: E-mail and mark sent
        if not await email_invoice(invoice, user, self.email_service, self.pdf_service):
            result.email_failed.append(invoice.invoice_number)
            return

        transition_invoice(
            invoice, InvoiceStatus.SENT, payment_term_days=self.payment_term_days
        )
        await self.invoice_repo.update(invoice)
        await self.uow.commit()
        result.sent.append(invoice.invoice_number)
