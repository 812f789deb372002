"""In-memory collaborators for tests"""

import json
from typing import Dict, List, Optional

from src.adapter.services.email_service import EmailMessage, TemplatedEmailService
from src.app.services.payment_gateway import (
    InvalidWebhookSignature,
    PaymentEvent,
    PaymentGateway,
    PaymentIntent,
)

VALID_SIGNATURE = "t=1,v1=test"


class FakePaymentGateway(PaymentGateway):
    """Keeps intents in memory; one intent per idempotency key, like the real provider"""

    def __init__(self):
        self.intents: Dict[str, PaymentIntent] = {}
        self.by_key: Dict[str, str] = {}
        self.create_calls = 0

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        idempotency_key: str,
        description: Optional[str] = None,
        receipt_email: Optional[str] = None,
    ) -> PaymentIntent:
        self.create_calls += 1
        if idempotency_key in self.by_key:
            return self.intents[self.by_key[idempotency_key]]
        intent_id = f"pi_test_{len(self.intents) + 1}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret",
            amount=amount,
            currency=currency,
            status="requires_payment_method",
        )
        self.intents[intent_id] = intent
        self.by_key[idempotency_key] = intent_id
        return intent

    async def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        return self.intents[intent_id]

    def parse_webhook_event(self, payload: bytes, signature: str) -> PaymentEvent:
        if signature != VALID_SIGNATURE:
            raise InvalidWebhookSignature("No signatures found matching the expected signature")
        event = json.loads(payload)
        obj = event["data"]["object"]
        return PaymentEvent(type=event["type"], intent_id=obj["id"], metadata=obj.get("metadata", {}))


class RecordingEmailService(TemplatedEmailService):
    """Composes real messages and records them instead of sending"""

    def __init__(self, fail: bool = False):
        super().__init__(admin_email="contact@bellafleurs.fr", site_url="https://bellafleurs.test")
        self.fail = fail
        self.sent: List[EmailMessage] = []

    async def deliver(self, message: EmailMessage) -> bool:
        if self.fail:
            return False
        self.sent.append(message)
        return True
