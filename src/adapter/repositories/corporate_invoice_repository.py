"""SQLAlchemy Corporate Invoice Repository Implementation

Implements corporate invoice persistence using SQLAlchemy async session.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.domain.corporate_invoice import CorporateInvoice, InvoiceStatus


class SqlAlchemyCorporateInvoiceRepository(CorporateInvoiceRepository):
    """
    SQLAlchemy implementation of CorporateInvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: CorporateInvoice) -> CorporateInvoice:
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: str) -> Optional[CorporateInvoice]:
        statement = select(CorporateInvoice).where(CorporateInvoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[CorporateInvoice]:
        statement = select(CorporateInvoice).where(
            CorporateInvoice.payment_intent_id == payment_intent_id
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def update(self, invoice: CorporateInvoice) -> CorporateInvoice:
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def exists_for_period(self, corporate_user_id: str, year: int, month: int) -> bool:
        stmt = select(func.count()).select_from(CorporateInvoice).where(
            CorporateInvoice.corporate_user_id == corporate_user_id,
            CorporateInvoice.period_year == year,
            CorporateInvoice.period_month == month,
        )
        result = await self.session.execute(stmt)
        count = result.scalar()
        return count > 0

    async def count_for_period(self, year: int, month: int) -> int:
        stmt = select(func.count()).select_from(CorporateInvoice).where(
            CorporateInvoice.period_year == year,
            CorporateInvoice.period_month == month,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        corporate_user_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[CorporateInvoice], int]:
        """
        Retrieve invoices newest first

        Returns:
            Tuple of (invoices, total count)
        """
        conditions = []
        if status:
            conditions.append(CorporateInvoice.status == status)
        if corporate_user_id:
            conditions.append(CorporateInvoice.corporate_user_id == corporate_user_id)

        # Get total count
        count_stmt = select(func.count()).select_from(CorporateInvoice).where(*conditions)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        statement = (
            select(CorporateInvoice)
            .where(*conditions)
            .order_by(CorporateInvoice.created_at.desc(), CorporateInvoice.invoice_number.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all()), total

    async def list_past_due(self, now: datetime) -> List[CorporateInvoice]:
        statement = select(CorporateInvoice).where(
            CorporateInvoice.status == InvoiceStatus.SENT,
            CorporateInvoice.due_date < now,
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
