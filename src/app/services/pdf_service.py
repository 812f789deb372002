"""PDF Generation Service Interface

Defines the contract for PDF generation operations.
"""

from abc import ABC, abstractmethod
from src.domain.corporate_invoice import CorporateInvoice


class PdfService(ABC):
    """
    Service interface for PDF generation

    Provides PDF generation capabilities for corporate invoices.
    """

    @abstractmethod
    def generate_corporate_invoice(
        self,
        invoice: CorporateInvoice,
        shop_name: str = "Bella Fleurs",
        shop_address: str = "Brétigny-sur-Orge, 91220",
    ) -> bytes:
        """
        Render a corporate invoice

        Args:
            invoice: Invoice with items and totals
            shop_name: Issuer name printed in the header
            shop_address: Issuer address printed in the header

        Returns:
            PDF document as bytes
        """
        pass
