"""Payment Gateway Interface

Defines the contract with the card payment processor.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


class PaymentProviderError(Exception):
    """Raised when the payment processor rejects or fails a call"""


class InvalidWebhookSignature(Exception):
    """Raised when a webhook payload does not match its signature"""


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: Optional[str]
    amount: int
    currency: str
    status: str


@dataclass(frozen=True)
class PaymentEvent:
    type: str
    intent_id: str
    metadata: Dict[str, str] = field(default_factory=dict)


class PaymentGateway(ABC):
    """
    Payment processor client

    Amounts are integer minor units (cents).
    """

    @abstractmethod
    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        idempotency_key: str,
        description: Optional[str] = None,
        receipt_email: Optional[str] = None,
    ) -> PaymentIntent:
        """
        Create a payment intent

        Args:
            amount: Amount in cents
            currency: ISO currency code (e.g., "eur")
            metadata: Identifiers echoed back in webhook events
            idempotency_key: Repeated calls with the same key return the same intent
            description: Statement description
            receipt_email: Address for the processor receipt

        Returns:
            Created PaymentIntent

        Raises:
            PaymentProviderError: processor call failed
        """
        pass

    @abstractmethod
    async def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        """
        Retrieve an existing payment intent

        Raises:
            PaymentProviderError: processor call failed
        """
        pass

    @abstractmethod
    def parse_webhook_event(self, payload: bytes, signature: str) -> PaymentEvent:
        """
        Verify and decode a webhook delivery

        Raises:
            InvalidWebhookSignature: signature check failed or payload is malformed
        """
        pass
