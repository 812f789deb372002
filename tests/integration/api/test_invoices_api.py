"""Integration tests for corporate invoice endpoints"""

import json
import pytest
from datetime import datetime
from decimal import Decimal
from httpx import AsyncClient

from src.domain.corporate_invoice import InvoiceStatus
from src.domain.order import OrderStatus
from src.domain.user import AccountType
from tests.fixtures.factories import make_invoice, make_order, make_user
from tests.fixtures.fakes import VALID_SIGNATURE


async def _seed_january(db_session):
    """Acme ordered twice in January 2024 (one cancelled), Globex never ordered"""
    db_session.add(make_user())
    db_session.add(make_user(user_id="corp-2", email="ap@globex.fr", company_name="Globex"))
    db_session.add(
        make_user(
            user_id="user-1", email="marie@example.com", company_name=None, account_type=AccountType.INDIVIDUAL
        )
    )
    db_session.add(make_order(order_number="BF-20240112-0001", user_id="corp-1", created_at=datetime(2024, 1, 12, 9)))
    db_session.add(make_order(order_number="BF-20240125-0001", user_id="corp-1", created_at=datetime(2024, 1, 25, 9)))
    db_session.add(
        make_order(
            order_number="BF-20240126-0001",
            user_id="corp-1",
            status=OrderStatus.CANCELLED,
            created_at=datetime(2024, 1, 26, 9),
        )
    )
    await db_session.commit()


class TestMonthlyInvoicingAPI:
    @pytest.mark.asyncio
    async def test_generate_then_rerun(self, client: AsyncClient, db_session, admin_headers, email_service):
        """
        Given: One corporate account with January orders
        When: January is invoiced twice
        Then: One invoice is created and e-mailed, the re-run skips it
        """
        # Arrange
        await _seed_january(db_session)

        # Act
        first = await client.post(
            "/api/admin/invoices/generate", json={"year": 2024, "month": 1}, headers=admin_headers
        )
        second = await client.post(
            "/api/admin/invoices/generate", json={"year": 2024, "month": 1}, headers=admin_headers
        )

        # Assert
        assert first.status_code == 200
        result = first.json()["data"]
        assert result["created"] == ["BFC-2024-01-0001"]
        assert result["sent"] == ["BFC-2024-01-0001"]
        assert result["skipped_empty"] == 1
        assert second.json()["data"]["skipped_existing"] == 1
        assert second.json()["data"]["created"] == []

        assert len(email_service.sent) == 1
        message = email_service.sent[0]
        assert message.to == "compta@acme.fr"
        filename, pdf = message.attachments[0]
        assert filename == "facture_BFC-2024-01-0001.pdf"
        assert pdf.startswith(b"%PDF")

        listing = await client.get("/api/admin/invoices?userId=corp-1", headers=admin_headers)
        invoice = listing.json()["data"]["invoices"][0]
        assert invoice["status"] == "sent"
        assert len(invoice["items"]) == 2
        assert Decimal(invoice["subtotal"]) == Decimal("205.00")
        assert Decimal(invoice["vat_amount"]) == Decimal("41.00")
        assert Decimal(invoice["total_amount"]) == Decimal("246.00")

    @pytest.mark.asyncio
    async def test_generate_requires_admin(self, client: AsyncClient, corporate_headers):
        response = await client.post(
            "/api/admin/invoices/generate", json={"year": 2024, "month": 1}, headers=corporate_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_month_out_of_range(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/admin/invoices/generate", json={"year": 2024, "month": 13}, headers=admin_headers
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_mark_overdue(self, client: AsyncClient, db_session, admin_headers):
        db_session.add(make_invoice(due_date=datetime(2024, 2, 1)))
        await db_session.commit()

        response = await client.post("/api/admin/invoices/mark-overdue", headers=admin_headers)

        assert response.json()["data"]["marked"] == ["BFC-2024-01-0001"]


class TestCorporateInvoiceAPI:
    @pytest.mark.asyncio
    async def test_company_sees_only_its_invoices(self, client: AsyncClient, db_session, corporate_headers):
        db_session.add(make_invoice())
        db_session.add(make_invoice(corporate_user_id="corp-2", invoice_number="BFC-2024-01-0002"))
        await db_session.commit()

        response = await client.get("/api/corporate/invoices", headers=corporate_headers)

        data = response.json()["data"]
        assert [i["invoice_number"] for i in data["invoices"]] == ["BFC-2024-01-0001"]
        assert data["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_individual_account_is_forbidden(self, client: AsyncClient, customer_headers):
        response = await client.get("/api/corporate/invoices", headers=customer_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_other_company_invoice(self, client: AsyncClient, db_session, corporate_headers):
        invoice = make_invoice(corporate_user_id="corp-2")
        db_session.add(invoice)
        await db_session.commit()

        response = await client.get(f"/api/corporate/invoices/{invoice.id}", headers=corporate_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "UNAUTHORIZED_ACCESS"

    @pytest.mark.asyncio
    async def test_download_pdf(self, client: AsyncClient, db_session, corporate_headers):
        invoice = make_invoice()
        db_session.add(invoice)
        await db_session.commit()

        response = await client.get(f"/api/corporate/invoices/{invoice.id}/download", headers=corporate_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert "facture_BFC-2024-01-0001.pdf" in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_card_payment_of_invoice(
        self, client: AsyncClient, db_session, corporate_headers, payment_gateway
    ):
        """
        Given: A sent invoice of 150.00 HT
        When: The company opens the payment page and the provider confirms the payment
        Then: 180.00 TTC is charged once and the invoice is paid
        """
        # Arrange
        invoice = make_invoice()
        db_session.add(invoice)
        await db_session.commit()

        # Act
        intent = await client.get(
            f"/api/corporate/invoices/{invoice.id}/payment-intent", headers=corporate_headers
        )
        again = await client.get(
            f"/api/corporate/invoices/{invoice.id}/payment-intent", headers=corporate_headers
        )
        intent_id = intent.json()["data"]["payment_intent_id"]
        event = {
            "type": "payment_intent.succeeded",
            "data": {"object": {"id": intent_id, "metadata": {"invoice_id": invoice.id}}},
        }
        webhook = await client.post(
            "/api/webhooks/payments", content=json.dumps(event), headers={"Stripe-Signature": VALID_SIGNATURE}
        )
        after = await client.get(
            f"/api/corporate/invoices/{invoice.id}/payment-intent", headers=corporate_headers
        )

        # Assert
        assert Decimal(intent.json()["data"]["amount"]) == Decimal("180.00")
        assert again.json()["data"]["payment_intent_id"] == intent_id
        assert payment_gateway.create_calls == 1
        assert payment_gateway.intents[intent_id].amount == 18000
        assert webhook.json()["data"]["target"] == "invoice"
        assert after.status_code == 409
        assert after.json()["error"]["code"] == "ALREADY_PAID"
        await db_session.refresh(invoice)
        assert invoice.status == InvoiceStatus.PAID


class TestAdminInvoiceAPI:
    @pytest.mark.asyncio
    async def test_mark_paid_twice(self, client: AsyncClient, db_session, admin_headers):
        invoice = make_invoice()
        db_session.add(invoice)
        await db_session.commit()

        first = await client.patch(
            f"/api/admin/invoices/{invoice.id}",
            json={"status": "paid", "paid_date": "2024-02-20T14:00:00"},
            headers=admin_headers,
        )
        second = await client.patch(
            f"/api/admin/invoices/{invoice.id}", json={"status": "paid"}, headers=admin_headers
        )

        assert first.status_code == 200
        assert first.json()["data"]["paid_at"] == "2024-02-20T14:00:00"
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "ALREADY_PAID"

    @pytest.mark.asyncio
    async def test_send_draft_fails_when_email_fails(
        self, client: AsyncClient, db_session, admin_headers, email_service
    ):
        db_session.add(make_user())
        invoice = make_invoice(status=InvoiceStatus.DRAFT)
        db_session.add(invoice)
        await db_session.commit()
        email_service.fail = True

        response = await client.patch(
            f"/api/admin/invoices/{invoice.id}", json={"status": "sent"}, headers=admin_headers
        )

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "EMAIL_SEND_FAILED"
        await db_session.refresh(invoice)
        assert invoice.status == InvoiceStatus.DRAFT

    @pytest.mark.asyncio
    async def test_resend(self, client: AsyncClient, db_session, admin_headers, email_service):
        db_session.add(make_user())
        invoice = make_invoice(status=InvoiceStatus.OVERDUE)
        db_session.add(invoice)
        await db_session.commit()

        response = await client.post(f"/api/admin/invoices/{invoice.id}/resend", headers=admin_headers)

        assert response.json()["data"] == {"invoice_number": "BFC-2024-01-0001", "recipient": "compta@acme.fr"}
        assert len(email_service.sent) == 1
