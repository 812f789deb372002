"""E-mail Service Implementations

Provides concrete implementations for sending transactional e-mails.
Messages are composed once in TemplatedEmailService; subclasses only
decide how a composed message is delivered.
"""

import base64
import logging
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import httpx
from src.app.services.email_service import EmailService
from src.domain.corporate_invoice import CorporateInvoice
from src.domain.order import DeliveryType, Order, OrderStatus

logger = logging.getLogger(__name__)

MONTHS_FR = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)

STATUS_TEMPLATES = {
    OrderStatus.CONFIRMED: (
        "✅ Votre commande Bella Fleurs est confirmée",
        "Votre commande {number} est confirmée. Nous vous tiendrons informé(e) de sa préparation.",
    ),
    OrderStatus.PREPARING: (
        "🌸 Votre commande Bella Fleurs est en cours de création",
        "Nos fleuristes ont commencé la création de votre commande {number}.",
    ),
    OrderStatus.READY: (
        "✅ Votre commande Bella Fleurs est prête !",
        "Votre commande {number} est prête. {fulfillment}",
    ),
    OrderStatus.DELIVERED: (
        "🎉 Votre commande Bella Fleurs a été livrée !",
        "Votre commande {number} a été livrée avec succès. Merci de votre confiance !",
    ),
    OrderStatus.CANCELLED: (
        "Votre commande Bella Fleurs a été annulée",
        "Votre commande {number} a été annulée. Contactez-nous pour toute question.",
    ),
}


@dataclass
class EmailMessage:
    to: str
    subject: str
    text: str
    attachments: List[Tuple[str, bytes]] = field(default_factory=list)


class TemplatedEmailService(EmailService):
    """
    Composes the shop's e-mails and hands them to deliver()

    Args:
        admin_email: Shop inbox receiving new order alerts
        site_url: Storefront URL used in links
    """

    def __init__(self, admin_email: str, site_url: str):
        self.admin_email = admin_email
        self.site_url = site_url.rstrip("/")

    @abstractmethod
    async def deliver(self, message: EmailMessage) -> bool:
        pass

    async def send_order_confirmation(self, order: Order) -> bool:
        lines = "\n".join(
            f"- {item.name} x{item.quantity}: {item.line_total} €" for item in order.line_items()
        )
        text = (
            f"Bonjour {order.customer_name},\n\n"
            f"Merci pour votre commande {order.order_number}.\n\n"
            f"{lines}\n\nTotal: {order.total_amount} €\n\n"
            f"Suivez votre commande sur {self.site_url}/commande/{order.id}\n\n"
            f"L'équipe Bella Fleurs"
        )
        return await self.deliver(
            EmailMessage(
                to=order.customer_email,
                subject=f"✅ Confirmation de votre commande {order.order_number}",
                text=text,
            )
        )

    async def send_new_order_alert(self, order: Order) -> bool:
        company = (order.corporate_data or {}).get("company_name")
        subject = (
            f"🏢 Nouvelle Commande Corporate - {company} - {order.total_amount}€"
            if order.is_corporate
            else f"🌸 Nouvelle commande {order.order_number} - {order.total_amount}€"
        )
        text = (
            f"Commande {order.order_number}\n"
            f"Client: {order.customer_name} <{order.customer_email}> {order.customer_phone}\n"
            f"Montant: {order.total_amount} €\n"
            f"Mode: {order.delivery_info.get('type')}\n\n"
            f"{self.site_url}/admin/commandes/{order.id}"
        )
        return await self.deliver(EmailMessage(to=self.admin_email, subject=subject, text=text))

    async def send_order_status_update(self, order: Order) -> bool:
        template = STATUS_TEMPLATES.get(order.status)
        if template is None:
            logger.warning(f"No e-mail template for status {order.status.value}")
            return False

        subject, body = template
        if order.delivery_info.get("type") == DeliveryType.PICKUP.value:
            fulfillment = "Vous pouvez venir la récupérer en boutique aux horaires d'ouverture."
        else:
            fulfillment = "Nous préparons sa livraison."
        entries = order.timeline_entries()
        note = entries[-1].note if entries else None

        text = f"Bonjour {order.customer_name},\n\n" + body.format(
            number=order.order_number, fulfillment=fulfillment
        )
        if note:
            text += f"\n\nNote: {note}"
        text += "\n\nL'équipe Bella Fleurs"
        return await self.deliver(EmailMessage(to=order.customer_email, subject=subject, text=text))

    async def send_invoice(
        self,
        invoice: CorporateInvoice,
        recipient_email: str,
        recipient_name: str,
        pdf: Optional[bytes] = None,
    ) -> bool:
        month = MONTHS_FR[invoice.period_month - 1]
        due = invoice.due_date.strftime("%d/%m/%Y") if invoice.due_date else "à réception"
        text = (
            f"Bonjour {recipient_name},\n\n"
            f"Veuillez trouver ci-joint la facture {invoice.invoice_number} de {invoice.company_name} "
            f"pour {month} {invoice.period_year}.\n\n"
            f"Montant HT: {invoice.subtotal} €\n"
            f"TVA: {invoice.vat_amount} €\n"
            f"Montant TTC: {invoice.total_amount} €\n"
            f"Échéance: {due}\n\n"
            f"Réglez en ligne sur {self.site_url}/corporate/invoices/{invoice.id}\n\n"
            f"L'équipe Bella Fleurs"
        )
        attachments = [(f"facture_{invoice.invoice_number}.pdf", pdf)] if pdf else []
        return await self.deliver(
            EmailMessage(
                to=recipient_email,
                subject=f"🧾 Facture {invoice.invoice_number} - {invoice.company_name} - {month} {invoice.period_year}",
                text=text,
                attachments=attachments,
            )
        )


class LoggingEmailService(TemplatedEmailService):
    """
    E-mail service that logs messages instead of sending them

    Useful for development and testing, or as a fallback.
    """

    async def deliver(self, message: EmailMessage) -> bool:
        """
        Log e-mail

        Returns:
            Always True (logging never fails)
        """
        logger.info(
            f"[EMAIL] To: {message.to}, Subject: {message.subject}, "
            f"Attachments: {[name for name, _ in message.attachments]}"
        )
        return True


class HttpEmailService(TemplatedEmailService):
    """
    E-mail service posting to a transactional e-mail HTTP API

    Sends JSON payload {from, to, subject, text, attachments} with a bearer key.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        sender: str,
        admin_email: str,
        site_url: str,
        timeout: float = 10.0,
    ):
        """
        Initialize HTTP e-mail service

        Args:
            api_url: URL to POST messages to
            api_key: Bearer key of the e-mail API
            sender: From header
            admin_email: Shop inbox
            site_url: Storefront URL
            timeout: Request timeout in seconds
        """
        super().__init__(admin_email=admin_email, site_url=site_url)
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout

    async def deliver(self, message: EmailMessage) -> bool:
        """
        Send e-mail via the HTTP API

        Returns:
            True if the API accepted the message, False otherwise
        """
        payload = {
            "from": self.sender,
            "to": [message.to],
            "subject": message.subject,
            "text": message.text,
            "attachments": [
                {"filename": name, "content": base64.b64encode(content).decode("ascii")}
                for name, content in message.attachments
            ],
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                )
                response.raise_for_status()
                logger.info(f"E-mail '{message.subject}' sent to {message.to}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send e-mail '{message.subject}' to {message.to}: {e}")
            return False


def create_email_service(
    api_url: Optional[str] = None,
    api_key: str = "",
    sender: str = "",
    admin_email: str = "",
    site_url: str = "",
) -> EmailService:
    """
    Factory function to create appropriate e-mail service

    Args:
        api_url: Optional e-mail API URL. If provided, the HTTP service does
                 the sending; otherwise messages are only logged.

    Returns:
        Configured EmailService
    """
    if not api_url:
        return LoggingEmailService(admin_email=admin_email, site_url=site_url)

    return HttpEmailService(
        api_url=api_url,
        api_key=api_key,
        sender=sender,
        admin_email=admin_email,
        site_url=site_url,
    )
