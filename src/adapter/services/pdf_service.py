"""ReportLab PDF Generation Service Implementation

Implements corporate invoice rendering using ReportLab library.
"""

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.corporate_invoice import CorporateInvoice, InvoiceStatus, totals_for

STATUS_LABELS = {
    InvoiceStatus.DRAFT: "BROUILLON",
    InvoiceStatus.SENT: "À RÉGLER",
    InvoiceStatus.PAID: "PAYÉE",
    InvoiceStatus.OVERDUE: "EN RETARD",
}

BRAND_COLOR = colors.HexColor("#8B4F6B")


def _euros(amount) -> str:
    return f"{amount:,.2f} €".replace(",", " ").replace(".", ",")


def _day(value) -> str:
    return value.strftime("%d/%m/%Y") if value else "-"


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Renders an A4 invoice: header, billing details, one row per order, HT/TVA/TTC totals.
    """

    def generate_corporate_invoice(
        self,
        invoice: CorporateInvoice,
        shop_name: str = "Bella Fleurs",
        shop_address: str = "Brétigny-sur-Orge, 91220",
    ) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"Facture {invoice.invoice_number}",
        )

        styles = getSampleStyleSheet()
        elements = []

        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=22,
            spaceAfter=6,
            textColor=BRAND_COLOR,
        )
        label_style = ParagraphStyle(
            "LabelStyle",
            parent=styles["Heading2"],
            fontSize=14,
            spaceAfter=16,
        )
        muted_style = ParagraphStyle(
            "MutedStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.HexColor("#7F8C8D"),
        )
        bold_style = ParagraphStyle(
            "BoldStyle",
            parent=styles["Normal"],
            fontSize=10,
            fontName="Helvetica-Bold",
        )

        # Header
        elements.append(Paragraph(escape(shop_name), title_style))
        elements.append(Paragraph(shop_address, muted_style))
        elements.append(Spacer(1, 8 * mm))
        elements.append(
            Paragraph(f"FACTURE {invoice.invoice_number} - {STATUS_LABELS[invoice.status]}", label_style)
        )

        # Invoice details
        info = [
            ["Client :", invoice.company_name],
            ["Période :", f"{_day(invoice.period_start)} au {_day(invoice.period_end)}"],
            ["Émise le :", _day(invoice.issued_at or invoice.created_at)],
            ["Échéance :", _day(invoice.due_date)],
        ]
        if invoice.paid_at:
            info.append(["Payée le :", _day(invoice.paid_at)])

        info_table = Table(info, colWidths=[35 * mm, 120 * mm])
        info_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#7F8C8D")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(info_table)
        elements.append(Spacer(1, 10 * mm))

        # One row per order
        rows = [["Commande", "Date", "Description", "Montant HT"]]
        for item in invoice.invoice_items():
            rows.append(
                [item.order_number, _day(item.order_date), item.description, _euros(item.amount)]
            )

        items_table = Table(rows, colWidths=[40 * mm, 25 * mm, 65 * mm, 40 * mm], repeatRows=1)
        items_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), BRAND_COLOR),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (3, 1), (3, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F8F9F9")]),
                ]
            )
        )
        elements.append(items_table)
        elements.append(Spacer(1, 5 * mm))

        # Totals
        totals = totals_for(invoice)
        vat_percent = f"{invoice.vat_rate * 100:.0f}"
        totals_table = Table(
            [
                ["", "Total HT :", _euros(totals.subtotal)],
                ["", f"TVA {vat_percent} % :", _euros(totals.vat_amount)],
                ["", "Total TTC :", _euros(totals.total_amount)],
            ],
            colWidths=[90 * mm, 40 * mm, 40 * mm],
        )
        totals_table.setStyle(
            TableStyle(
                [
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("FONTNAME", (1, 2), (-1, 2), "Helvetica-Bold"),
                    ("LINEABOVE", (1, 2), (-1, 2), 1.5, BRAND_COLOR),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(totals_table)
        elements.append(Spacer(1, 12 * mm))

        if invoice.notes:
            elements.append(Paragraph("Notes :", bold_style))
            elements.append(Paragraph(escape(invoice.notes), styles["Normal"]))
            elements.append(Spacer(1, 6 * mm))

        elements.append(
            Paragraph(
                f"<i>Paiement à {_day(invoice.due_date)} par carte bancaire depuis votre espace entreprise.</i>",
                muted_style,
            )
        )

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes
