"""Stripe Payment Gateway Implementation

The stripe SDK is synchronous, calls run in a worker thread.
"""

import asyncio
import logging
from typing import Any, Dict, Optional
import stripe
from src.app.services.payment_gateway import (
    InvalidWebhookSignature,
    PaymentEvent,
    PaymentGateway,
    PaymentIntent,
    PaymentProviderError,
)

logger = logging.getLogger(__name__)


def _plain(obj) -> Dict[str, Any]:
    """StripeObject to dict, recent SDKs no longer subclass dict"""
    return obj.to_dict() if hasattr(obj, "to_dict") else dict(obj)


def _to_intent(obj) -> PaymentIntent:
    data = _plain(obj)
    return PaymentIntent(
        id=data["id"],
        client_secret=data.get("client_secret"),
        amount=data["amount"],
        currency=data["currency"],
        status=data["status"],
    )


class StripePaymentGateway(PaymentGateway):
    """
    PaymentGateway backed by Stripe PaymentIntents

    Args:
        api_key: Stripe secret key
        webhook_secret: Signing secret of the webhook endpoint
    """

    def __init__(self, api_key: str, webhook_secret: str = ""):
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        idempotency_key: str,
        description: Optional[str] = None,
        receipt_email: Optional[str] = None,
    ) -> PaymentIntent:
        params = {
            "amount": amount,
            "currency": currency,
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
            "idempotency_key": idempotency_key,
            "api_key": self.api_key,
        }
        if description:
            params["description"] = description
        if receipt_email:
            params["receipt_email"] = receipt_email

        try:
            intent = _to_intent(await asyncio.to_thread(stripe.PaymentIntent.create, **params))
        except stripe.StripeError as e:
            raise PaymentProviderError(e.user_message or str(e)) from e

        logger.info(f"Payment intent {intent.id} created ({amount} {currency}, key {idempotency_key})")
        return intent

    async def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.retrieve, intent_id, api_key=self.api_key
            )
        except stripe.StripeError as e:
            raise PaymentProviderError(e.user_message or str(e)) from e
        return _to_intent(intent)

    def parse_webhook_event(self, payload: bytes, signature: str) -> PaymentEvent:
        if not self.webhook_secret:
            raise InvalidWebhookSignature("Webhook secret not configured")
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            raise InvalidWebhookSignature(str(e)) from e

        obj = _plain(event["data"]["object"])
        metadata = obj.get("metadata")
        metadata = _plain(metadata) if metadata is not None else {}
        return PaymentEvent(
            type=event["type"],
            intent_id=obj.get("id", ""),
            metadata={key: str(value) for key, value in metadata.items()},
        )
