"""Unit tests for the Stripe payment gateway, using real Stripe objects"""

import pytest
import stripe
from unittest.mock import patch

from src.adapter.services.payment_gateway import StripePaymentGateway
from src.app.services.payment_gateway import (
    PAYMENT_SUCCEEDED,
    InvalidWebhookSignature,
    PaymentProviderError,
)

INTENT = {
    "id": "pi_1",
    "object": "payment_intent",
    "client_secret": "pi_1_secret_abc",
    "amount": 10250,
    "currency": "eur",
    "status": "requires_payment_method",
    "metadata": {"order_id": "order-1", "kind": "order"},
}


def stripe_object(values):
    return stripe.StripeObject.construct_from(values, "sk_test_123")


@pytest.fixture
def gateway():
    return StripePaymentGateway(api_key="sk_test_123", webhook_secret="whsec_test")


@pytest.mark.asyncio
class TestPaymentIntents:
    async def test_create_maps_stripe_object(self, gateway):
        with patch.object(stripe.PaymentIntent, "create", return_value=stripe_object(INTENT)) as create:
            intent = await gateway.create_payment_intent(
                amount=10250,
                currency="eur",
                metadata={"order_id": "order-1"},
                idempotency_key="order-order-1",
                receipt_email="marie@example.com",
            )

        assert intent.id == "pi_1"
        assert intent.client_secret == "pi_1_secret_abc"
        assert intent.amount == 10250
        assert intent.status == "requires_payment_method"
        kwargs = create.call_args.kwargs
        assert kwargs["idempotency_key"] == "order-order-1"
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["receipt_email"] == "marie@example.com"
        assert "description" not in kwargs

    async def test_retrieve_maps_stripe_object(self, gateway):
        succeeded = dict(INTENT, status="succeeded")
        with patch.object(stripe.PaymentIntent, "retrieve", return_value=stripe_object(succeeded)):
            intent = await gateway.retrieve_payment_intent("pi_1")

        assert intent.status == "succeeded"
        assert intent.currency == "eur"

    async def test_stripe_error_becomes_provider_error(self, gateway):
        with patch.object(stripe.PaymentIntent, "create", side_effect=stripe.StripeError("card declined")):
            with pytest.raises(PaymentProviderError):
                await gateway.create_payment_intent(
                    amount=100, currency="eur", metadata={}, idempotency_key="order-x"
                )


class TestWebhookEvents:
    def test_event_is_parsed_from_stripe_object(self, gateway):
        event = stripe_object(
            {"id": "evt_1", "type": PAYMENT_SUCCEEDED, "data": {"object": INTENT}}
        )
        with patch.object(stripe.Webhook, "construct_event", return_value=event) as construct:
            parsed = gateway.parse_webhook_event(b"{}", "t=1,v1=sig")

        assert parsed.type == PAYMENT_SUCCEEDED
        assert parsed.intent_id == "pi_1"
        assert parsed.metadata == {"order_id": "order-1", "kind": "order"}
        construct.assert_called_once_with(b"{}", "t=1,v1=sig", "whsec_test")

    def test_event_without_metadata(self, gateway):
        event = stripe_object(
            {"id": "evt_2", "type": "charge.refunded", "data": {"object": {"id": "ch_1", "object": "charge"}}}
        )
        with patch.object(stripe.Webhook, "construct_event", return_value=event):
            parsed = gateway.parse_webhook_event(b"{}", "sig")

        assert parsed.intent_id == "ch_1"
        assert parsed.metadata == {}

    def test_bad_signature(self, gateway):
        error = stripe.SignatureVerificationError("No signatures found", "sig")
        with patch.object(stripe.Webhook, "construct_event", side_effect=error):
            with pytest.raises(InvalidWebhookSignature):
                gateway.parse_webhook_event(b"{}", "sig")

    def test_missing_secret_rejects_every_event(self):
        with pytest.raises(InvalidWebhookSignature):
            StripePaymentGateway(api_key="sk_test_123").parse_webhook_event(b"{}", "sig")
