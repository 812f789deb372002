"""Corporate Invoice Repository Interface

Defines the contract for corporate invoice persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from src.domain.corporate_invoice import CorporateInvoice, InvoiceStatus


class CorporateInvoiceRepository(ABC):
    """
    Repository interface for CorporateInvoice persistence
    """

    @abstractmethod
    async def create(self, invoice: CorporateInvoice) -> CorporateInvoice:
        """
        Create a new invoice

        Args:
            invoice: CorporateInvoice entity to persist

        Returns:
            Created CorporateInvoice
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[CorporateInvoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            CorporateInvoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[CorporateInvoice]:
        pass

    @abstractmethod
    async def update(self, invoice: CorporateInvoice) -> CorporateInvoice:
        """
        Update an existing invoice

        Args:
            invoice: CorporateInvoice entity with updated values

        Returns:
            Updated CorporateInvoice
        """
        pass

    @abstractmethod
    async def exists_for_period(self, corporate_user_id: str, year: int, month: int) -> bool:
        """
        Check if an invoice already exists for the user and billing month
        """
        pass

    @abstractmethod
    async def count_for_period(self, year: int, month: int) -> int:
        """
        Count invoices of a billing month, all users included

        Used to derive the invoice number sequence.
        """
        pass

    @abstractmethod
    async def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        corporate_user_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[CorporateInvoice], int]:
        """
        Retrieve invoices newest first

        Args:
            status: Optional filter by status
            corporate_user_id: Optional filter by owner
            limit: Maximum number of invoices to return
            offset: Offset for pagination

        Returns:
            Tuple of (invoices, total count)
        """
        pass

    @abstractmethod
    async def list_past_due(self, now: datetime) -> List[CorporateInvoice]:
        """
        Retrieve sent invoices whose due date is before now
        """
        pass
