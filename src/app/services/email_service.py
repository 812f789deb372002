"""E-mail Service Interface

Defines the contract for transactional e-mails. Sending is best effort:
implementations report failure by returning False.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.corporate_invoice import CorporateInvoice
from src.domain.order import Order


class EmailService(ABC):
    """
    Abstract transactional e-mail sender

    Implementations can send through:
    - A transactional e-mail HTTP API
    - The application log (development)
    """

    @abstractmethod
    async def send_order_confirmation(self, order: Order) -> bool:
        """
        Send the order confirmation to the customer

        Args:
            order: Newly created order

        Returns:
            True if e-mail sent successfully, False otherwise
        """
        pass

    @abstractmethod
    async def send_new_order_alert(self, order: Order) -> bool:
        """
        Notify the shop about a new order

        Args:
            order: Newly created order

        Returns:
            True if e-mail sent successfully, False otherwise
        """
        pass

    @abstractmethod
    async def send_order_status_update(self, order: Order) -> bool:
        """
        Tell the customer their order moved to a new status

        Args:
            order: Order after the status change

        Returns:
            True if e-mail sent successfully, False otherwise
        """
        pass

    @abstractmethod
    async def send_invoice(
        self,
        invoice: CorporateInvoice,
        recipient_email: str,
        recipient_name: str,
        pdf: Optional[bytes] = None,
    ) -> bool:
        """
        Send a corporate invoice to its owner

        Args:
            invoice: Invoice to send
            recipient_email: Owner e-mail
            recipient_name: Owner display name
            pdf: Optional rendered invoice attached to the e-mail

        Returns:
            True if e-mail sent successfully, False otherwise
        """
        pass
