# shirur_express/services/receipts.py
import io
from typing import Any, Dict, Optional

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def build_invoice_receipt(
    booking: Dict[str, Any],
    invoice: Dict[str, Any],
    provider: Optional[Dict[str, Any]] = None
) -> bytes:
    """Render a one-page PDF bill for a booking's invoice"""
    buffer = io.BytesIO()
    p = canvas.Canvas(buffer, pagesize=letter)

    p.setTitle(f"Invoice {invoice['invoice_id']}")
    p.setAuthor("Shirur Express")
    p.setSubject("Service Invoice")

    p.setFont("Helvetica-Bold", 16)
    p.drawString(100, 720, "Service Invoice")
    p.setFont("Helvetica", 12)
    p.drawString(100, 750, "Shirur Express")
    p.setStrokeColorRGB(0.8, 0.8, 0.8)
    p.rect(50, 50, 500, 700)

    y_position = 690
    lines = [
        f"Invoice ID: {invoice['invoice_id']}",
        f"Booking ID: {booking['booking_id']}",
        f"Date: {invoice['created_at']:%d %b %Y}" if invoice.get("created_at") else None,
        f"Service: {booking['service_type']}",
        f"Provider: {provider['business_name']}" if provider else None,
        f"Status: {booking['status']}",
    ]
    for line in filter(None, lines):
        p.drawString(100, y_position, line)
        y_position -= 24

    y_position -= 12
    p.setFont("Helvetica-Bold", 12)
    p.drawString(100, y_position, "Item")
    p.drawRightString(480, y_position, "Amount (INR)")
    p.setFont("Helvetica", 12)
    y_position -= 24

    for part in invoice.get("spare_parts") or []:
        p.drawString(100, y_position, str(part["name"])[:50])
        p.drawRightString(480, y_position, f"{float(part['price']):.2f}")
        y_position -= 20
    p.drawString(100, y_position, "Service charge")
    p.drawRightString(480, y_position, f"{float(invoice['service_charge']):.2f}")
    y_position -= 30

    p.setFont("Helvetica-Bold", 13)
    p.drawString(100, y_position, "Total")
    p.drawRightString(480, y_position, f"{float(invoice['total']):.2f}")

    p.setFont("Helvetica-Oblique", 10)
    p.drawString(100, 60, "Thank you for choosing Shirur Express!")

    p.showPage()
    p.save()
    return buffer.getvalue()
