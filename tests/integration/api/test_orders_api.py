"""Integration tests for order endpoints"""

import json
import re
import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from httpx import AsyncClient

from src.domain.order import OrderStatus, PaymentStatus
from src.domain.shop_settings import ClosureEnabled, ShopSettings
from tests.fixtures.factories import CUSTOMER, make_order, make_product
from tests.fixtures.fakes import VALID_SIGNATURE


async def _seed_catalog(db_session):
    db_session.add(make_product(name="Bouquet de roses", price="45.00", product_id="p-roses"))
    db_session.add(make_product(name="Couronne de deuil", price="150.00", category="Deuil", product_id="p-couronne"))
    db_session.add(make_product(name="Ancienne collection", is_active=False, product_id="p-old"))
    await db_session.commit()


def _checkout(items, delivery=None, **extra):
    payload = {
        "items": items,
        "customer_info": dict(CUSTOMER),
        "delivery_info": delivery or {"type": "pickup", "date": "2024-02-14T10:00:00"},
    }
    payload.update(extra)
    return payload


class TestCheckoutAPI:
    """Integration test suite for POST /api/orders"""

    @pytest.mark.asyncio
    async def test_guest_checkout(self, client: AsyncClient, db_session, email_service):
        """Guest order is created pending, priced from the catalog, and both e-mails go out"""
        # Arrange
        await _seed_catalog(db_session)

        # Act
        response = await client.post(
            "/api/orders", json=_checkout([{"product_id": "p-roses", "quantity": 2}])
        )

        # Assert
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        order = body["data"]
        assert re.match(r"^BF-\d{8}-0001$", order["order_number"])
        assert order["status"] == "pending"
        assert order["payment_status"] == "pending"
        assert order["user_id"] is None
        assert Decimal(order["total_amount"]) == Decimal("90.00")
        assert order["timeline"][0]["note"] == "Commande créée"
        assert [m.to for m in email_service.sent] == ["marie@example.com", "contact@bellafleurs.fr"]

    @pytest.mark.asyncio
    async def test_home_delivery_in_covered_zone(self, client: AsyncClient, db_session):
        await _seed_catalog(db_session)
        delivery = {
            "type": "delivery",
            "date": "2024-02-14T10:00:00",
            "address": {"street": "12 rue des Lilas", "city": "Le Plessis-Pâté", "zip_code": "91220"},
        }

        response = await client.post(
            "/api/orders", json=_checkout([{"product_id": "p-roses", "quantity": 1}], delivery)
        )

        assert response.status_code == 201
        assert response.json()["data"]["delivery_info"]["address"]["zip_code"] == "91220"

    @pytest.mark.asyncio
    async def test_delivery_outside_zone(self, client: AsyncClient, db_session):
        await _seed_catalog(db_session)
        delivery = {
            "type": "delivery",
            "date": "2024-02-14T10:00:00",
            "address": {"street": "1 rue de Rivoli", "city": "Paris", "zip_code": "75001"},
        }

        response = await client.post(
            "/api/orders", json=_checkout([{"product_id": "p-roses", "quantity": 1}], delivery)
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": {"code": "DELIVERY_ZONE_NOT_COVERED", "message": "We do not deliver to 75001"},
        }

    @pytest.mark.asyncio
    async def test_inactive_product(self, client: AsyncClient, db_session):
        await _seed_catalog(db_session)

        response = await client.post("/api/orders", json=_checkout([{"product_id": "p-old", "quantity": 1}]))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "PRODUCT_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_funeral_items_need_condolence_details(self, client: AsyncClient, db_session):
        await _seed_catalog(db_session)
        items = [{"product_id": "p-couronne", "quantity": 1}]

        missing = await client.post("/api/orders", json=_checkout(items))
        provided = await client.post(
            "/api/orders",
            json=_checkout(
                items,
                bereavement_info={
                    "deceased_name": "Jeanne Martin",
                    "sender_name": "La famille Dupont",
                    "condolence_message": "Avec toute notre affection.",
                },
            ),
        )

        assert missing.status_code == 400
        assert missing.json()["error"]["code"] == "BEREAVEMENT_INFO_REQUIRED"
        assert provided.status_code == 201
        assert provided.json()["data"]["bereavement_info"]["deceased_name"] == "Jeanne Martin"

    @pytest.mark.asyncio
    async def test_invalid_phone_is_a_validation_error(self, client: AsyncClient, db_session):
        payload = _checkout([{"product_id": "p-roses", "quantity": 1}])
        payload["customer_info"]["phone"] = "12"

        response = await client.post("/api/orders", json=payload)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_closed_shop_refuses_orders(self, client: AsyncClient, db_session):
        await _seed_catalog(db_session)
        today = datetime.utcnow().date()
        settings = ShopSettings()
        settings.set_closure(
            ClosureEnabled(
                start_date=today - timedelta(days=1),
                end_date=today + timedelta(days=1),
                message="Fermé pour inventaire",
            )
        )
        db_session.add(settings)
        await db_session.commit()

        response = await client.post(
            "/api/orders", json=_checkout([{"product_id": "p-roses", "quantity": 1}])
        )

        assert response.status_code == 409
        assert response.json()["error"] == {"code": "SHOP_CLOSED", "message": "Fermé pour inventaire"}

    @pytest.mark.asyncio
    async def test_corporate_order_is_billed_monthly(
        self, client: AsyncClient, db_session, corporate_headers
    ):
        await _seed_catalog(db_session)

        response = await client.post(
            "/api/orders",
            json=_checkout([{"product_id": "p-roses", "quantity": 3}]),
            headers=corporate_headers,
        )

        order = response.json()["data"]
        assert response.status_code == 201
        assert order["user_id"] == "corp-1"
        assert order["payment_method"] == "monthly_invoice"
        assert order["corporate_data"]["company_name"] == "Acme SAS"


class TestOrderAccessAPI:
    @pytest.mark.asyncio
    async def test_anonymous_cannot_read_orders(self, client: AsyncClient, db_session):
        order = make_order()
        db_session.add(order)
        await db_session.commit()

        response = await client.get(f"/api/orders/{order.id}")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_REQUIRED"

    @pytest.mark.asyncio
    async def test_guest_order_visible_to_account_with_same_email(
        self, client: AsyncClient, db_session, customer_headers
    ):
        order = make_order()
        db_session.add(order)
        await db_session.commit()

        response = await client.get(f"/api/orders/{order.id}", headers=customer_headers)

        assert response.status_code == 200
        assert response.json()["data"]["order_number"] == order.order_number

    @pytest.mark.asyncio
    async def test_other_customer_is_refused(self, client: AsyncClient, db_session, headers_for):
        order = make_order(user_id="user-1")
        db_session.add(order)
        await db_session.commit()

        response = await client.get(
            f"/api/orders/{order.id}", headers=headers_for("user-2", "paul@example.com")
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "UNAUTHORIZED_ACCESS"

    @pytest.mark.asyncio
    async def test_unknown_order(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/orders/does-not-exist", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ORDER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_expired_token_is_anonymous(self, client: AsyncClient, db_session):
        order = make_order()
        db_session.add(order)
        await db_session.commit()

        response = await client.get(
            f"/api/orders/{order.id}", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_user_order_history(self, client: AsyncClient, db_session, customer_headers):
        db_session.add(make_order(order_number="BF-20240115-0001", user_id="user-1"))
        db_session.add(make_order(order_number="BF-20240115-0002"))
        db_session.add(make_order(order_number="BF-20240115-0003", user_id="user-2", email="paul@example.com"))
        await db_session.commit()

        response = await client.get("/api/user/orders", headers=customer_headers)

        data = response.json()["data"]
        assert response.status_code == 200
        assert [o["order_number"] for o in data["orders"]] == ["BF-20240115-0002", "BF-20240115-0001"]
        assert data["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1}


class TestOrderStatusAPI:
    @pytest.mark.asyncio
    async def test_customer_cancels_pending_order(
        self, client: AsyncClient, db_session, customer_headers, email_service
    ):
        order = make_order(user_id="user-1")
        db_session.add(order)
        await db_session.commit()

        response = await client.post(
            f"/api/orders/{order.id}/cancel", json={"reason": "Erreur de date"}, headers=customer_headers
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["status"] == "cancelled"
        assert data["cancelled_at"] is not None
        assert data["timeline"][-1]["status"] == "cancelled"

    @pytest.mark.asyncio
    async def test_customer_cannot_cancel_once_preparing(
        self, client: AsyncClient, db_session, customer_headers
    ):
        order = make_order(user_id="user-1", status=OrderStatus.PREPARING)
        db_session.add(order)
        await db_session.commit()

        response = await client.post(f"/api/orders/{order.id}/cancel", headers=customer_headers)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_admin_moves_order_forward_only(self, client: AsyncClient, db_session, admin_headers):
        order = make_order()
        db_session.add(order)
        await db_session.commit()

        forward = await client.patch(
            f"/api/admin/orders/{order.id}/status",
            json={"status": "preparing", "note": "Création en cours"},
            headers=admin_headers,
        )
        backward = await client.patch(
            f"/api/admin/orders/{order.id}/status", json={"status": "confirmed"}, headers=admin_headers
        )

        assert forward.status_code == 200
        assert forward.json()["data"]["status"] == "preparing"
        assert forward.json()["data"]["timeline"][-1]["note"] == "Création en cours"
        assert backward.status_code == 409
        assert backward.json()["error"]["code"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_admin_endpoints_need_admin(self, client: AsyncClient, customer_headers):
        response = await client.get("/api/admin/orders", headers=customer_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_admin_listing_pagination(self, client: AsyncClient, db_session, admin_headers):
        start = datetime(2024, 1, 1, 8, 0)
        for i in range(25):
            db_session.add(
                make_order(order_number=f"BF-20240101-{i + 1:04d}", created_at=start + timedelta(minutes=i))
            )
        await db_session.commit()

        response = await client.get("/api/admin/orders?page=2&limit=10", headers=admin_headers)

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["pagination"] == {"page": 2, "limit": 10, "total": 25, "pages": 3}
        assert data["orders"][0]["order_number"] == "BF-20240101-0015"
        assert data["orders"][-1]["order_number"] == "BF-20240101-0006"


class TestOrderPaymentAPI:
    @pytest.mark.asyncio
    async def test_payment_intent_is_reused(self, client: AsyncClient, db_session, payment_gateway):
        order = make_order()
        db_session.add(order)
        await db_session.commit()

        first = await client.post(f"/api/orders/{order.id}/payment-intent")
        second = await client.post(f"/api/orders/{order.id}/payment-intent")

        assert first.status_code == 200
        assert first.json()["data"]["payment_intent_id"] == second.json()["data"]["payment_intent_id"]
        assert payment_gateway.create_calls == 1
        assert payment_gateway.intents["pi_test_1"].amount == 10250

    @pytest.mark.asyncio
    async def test_paid_webhook_confirms_order(self, client: AsyncClient, db_session):
        order = make_order()
        order.payment_intent_id = "pi_test_9"
        db_session.add(order)
        await db_session.commit()
        event = {
            "type": "payment_intent.succeeded",
            "data": {"object": {"id": "pi_test_9", "metadata": {"order_id": order.id}}},
        }

        first = await client.post(
            "/api/webhooks/payments", content=json.dumps(event), headers={"Stripe-Signature": VALID_SIGNATURE}
        )
        replay = await client.post(
            "/api/webhooks/payments", content=json.dumps(event), headers={"Stripe-Signature": VALID_SIGNATURE}
        )

        assert first.json()["data"]["handled"] is True
        assert replay.json()["data"]["handled"] is False
        await db_session.refresh(order)
        assert order.payment_status == PaymentStatus.PAID
        assert order.status == OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_webhook_with_bad_signature(self, client: AsyncClient):
        response = await client.post(
            "/api/webhooks/payments", content=b"{}", headers={"Stripe-Signature": "t=1,v1=forged"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_WEBHOOK_SIGNATURE"
