"""Monthly Corporate Invoicing Worker

Invoices corporate accounts for the previous month and marks unpaid
invoices past their due date as overdue. Meant to be run from cron on the
first days of each month.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.corporate_invoice_repository import SqlAlchemyCorporateInvoiceRepository
from src.adapter.repositories.order_repository import SqlAlchemyOrderRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.email_service import create_email_service
from src.adapter.services.pdf_service import ReportLabPdfService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.email_service import EmailService
from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoices import (
    GenerateMonthlyInvoices,
    MarkOverdueInvoices,
    GenerateMonthlyInvoicesCommandDTO,
    MonthlyInvoicingRunDTO,
)

logger = logging.getLogger(__name__)


def previous_month(today: datetime) -> Tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


class MonthlyInvoicingWorker:
    """
    Background worker for corporate monthly invoicing

    Idempotent: periods already invoiced are skipped, so a re-run only
    picks up accounts that failed before.

    Usage:
        # Invoice the previous month (typical cron usage)
        worker = MonthlyInvoicingWorker()
        result = await worker.run_once()

        # Invoice a specific month
        result = await worker.run_once(year=2024, month=1)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        email_service: Optional[EmailService] = None,
        pdf_service: Optional[PdfService] = None,
        session_factory=None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            email_service: E-mail service (defaults to the configured one)
            pdf_service: PDF renderer (defaults to ReportLab)
            session_factory: Session factory to use instead of creating an engine
        """
        self.engine = None
        if session_factory is None:
            self.engine = create_async_engine(db_uri or ApplicationConfig.DB_URI, echo=False, future=True)
            session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
        self.async_session_factory = session_factory

        self.email_service = email_service or create_email_service(
            api_url=ApplicationConfig.EMAIL_API_URL,
            api_key=ApplicationConfig.EMAIL_API_KEY,
            sender=ApplicationConfig.EMAIL_SENDER,
            admin_email=ApplicationConfig.ADMIN_EMAIL,
            site_url=ApplicationConfig.SITE_URL,
        )
        self.pdf_service = pdf_service or ReportLabPdfService()

        logger.info("MonthlyInvoicingWorker initialized")

    async def run_once(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> MonthlyInvoicingRunDTO:
        """
        Run invoicing once, then the overdue sweep

        Args:
            year: Billing year (optional, defaults to previous month)
            month: Billing month (optional, defaults to previous month)
            now: Reference instant for defaults and due dates

        Returns:
            MonthlyInvoicingRunDTO with both step results
        """
        start_time = time.time()
        now = now or datetime.utcnow()
        if year is None or month is None:
            year, month = previous_month(now)

        logger.info(f"Starting monthly invoicing for {year}-{month:02d}")
        run = MonthlyInvoicingRunDTO()

        # Step 1: Generate invoices
        async with self.async_session_factory() as session:
            use_case = GenerateMonthlyInvoices(
                uow=SqlAlchemyUnitOfWork(session),
                invoice_repo=SqlAlchemyCorporateInvoiceRepository(session),
                order_repo=SqlAlchemyOrderRepository(session),
                user_repo=SqlAlchemyUserRepository(session),
                email_service=self.email_service,
                pdf_service=self.pdf_service,
                vat_rate=ApplicationConfig.INVOICE_VAT_RATE,
                payment_term_days=ApplicationConfig.INVOICE_PAYMENT_TERM_DAYS,
            )
            result = await use_case.execute(GenerateMonthlyInvoicesCommandDTO(year=year, month=month))
            if result.is_err():
                logger.error(f"Monthly invoicing failed: {result.error.message}")
                run.errors.append(result.error.code)
            else:
                run.invoicing = result.value

        # Step 2: Overdue sweep
        async with self.async_session_factory() as session:
            use_case = MarkOverdueInvoices(
                uow=SqlAlchemyUnitOfWork(session),
                invoice_repo=SqlAlchemyCorporateInvoiceRepository(session),
            )
            result = await use_case.execute(now)
            if result.is_err():
                logger.error(f"Overdue sweep failed: {result.error.message}")
                run.errors.append(result.error.code)
            else:
                run.overdue = result.value

        run.execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Monthly invoicing complete in {run.execution_time_ms}ms")
        return run

    async def shutdown(self):
        """Cleanup resources"""
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("MonthlyInvoicingWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Invoice the previous month
        python -m src.worker.monthly_invoicing

        # Invoice a specific month
        python -m src.worker.monthly_invoicing --year 2024 --month 1
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Monthly Corporate Invoicing Worker")
    parser.add_argument("--year", type=int, help="Billing year")
    parser.add_argument("--month", type=int, help="Billing month")
    args = parser.parse_args()

    worker = MonthlyInvoicingWorker()

    try:
        result = await worker.run_once(year=args.year, month=args.month)
        if result.invoicing:
            print(f"Invoicing {result.invoicing.year}-{result.invoicing.month:02d}:")
            print(f"  Created: {len(result.invoicing.created)}")
            print(f"  Sent: {len(result.invoicing.sent)}")
            print(f"  Left in draft: {len(result.invoicing.email_failed)}")
            print(f"  Failed: {len(result.invoicing.failed)}")
        if result.overdue:
            print(f"Marked overdue: {len(result.overdue.marked)}")
        print(f"Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
