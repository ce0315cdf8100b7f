# movment/services/invoice.py
"""
Invoice for a booked event: a JSON projection and an on-demand A4 PDF
(reportlab canvas + verification QR). Nothing is written to disk.
"""
from __future__ import annotations

import io
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

import qrcode
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from movment.core.config import settings
from movment.db.types import utcnow
from movment.models.event import Event
from movment.models.payment import Payment

SERVICE_ROWS = [
    ("Venue Arrangement", "venue"),
    ("Decoration", "decoration"),
    ("Catering", "catering"),
    ("Sound & Lighting", "sound_lighting"),
    ("Photography / Videography", "photography"),
    ("Event Management Fee", "event_management_fee"),
]

_CTRL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def invoice_number(event: Event) -> str:
    return "INV-" + f"{event.id:08d}"[-8:]


def safe_text(value: Any) -> str:
    """Single-line text Helvetica can render; '-' when empty."""
    if value is None:
        return "-"
    text = re.sub(r"[\r\n\t]+", " ", str(value))
    text = _CTRL.sub("", text).replace("—", "-").strip()
    return text or "-"


def _fmt_date(value: Optional[datetime]) -> str:
    return value.strftime("%d %b %Y") if value else ""


def service_lines(event: Event) -> List[str]:
    labels = [s.get("service") for s in (event.additional_services or []) if s.get("service")]
    standard = [label for label, _ in SERVICE_ROWS]
    custom = [l for l in labels if not any(l.lower() in s.lower() for s in standard)]
    return standard + custom


def _user_dict(user) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email, "phone": user.phone}


def build_invoice(event: Event, payments: Sequence[Payment] = ()) -> Dict[str, Any]:
    paid = sum(p.amount - (p.refunded_amount or 0) for p in payments if p.status in ("completed", "partially_refunded"))
    return {
        "type": "invoice",
        "invoiceNumber": invoice_number(event),
        "eventId": event.id,
        "title": event.title,
        "eventType": event.type,
        "scheduledAt": event.scheduled_at.isoformat(),
        "guestCount": event.guest_count,
        "venue": event.venue,
        "location": event.location,
        "additionalServices": event.additional_services or [],
        "bookedBy": _user_dict(event.booked_by),
        "assignedManager": _user_dict(event.assigned_manager),
        "status": event.status,
        "amountPaid": round(paid, 2),
        "createdAt": event.created_at.isoformat(),
    }


def _qr_image(text: str) -> ImageReader:
    img = qrcode.make(text)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


class _Writer:
    """Top-down cursor over a reportlab canvas."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.y = A4[1] - 50

    def gap(self, dy: float) -> None:
        self.y -= dy

    def text(self, value: str, x: float = 50, size: int = 9, bold: bool = False) -> None:
        self.c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        self.c.drawString(x, self.y, value)

    def line(self, label: str, value: Any) -> None:
        self.text(safe_text(label))
        self.text(safe_text(value), x=230)
        self.gap(12)

    def section(self, title: str) -> None:
        self.text(safe_text(title), size=11, bold=True)
        self.gap(18)


def render_invoice_pdf(event: Event, number: Optional[str] = None, now: Optional[datetime] = None) -> bytes:
    now = now or utcnow()
    number = number or invoice_number(event)
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.setTitle(f"Invoice {number}")
    w = _Writer(c)

    # company
    w.text("Event Management Invoice", size=14, bold=True)
    w.gap(28)
    w.text(safe_text(settings.INVOICE_COMPANY_NAME), size=10, bold=True)
    w.gap(14)
    w.text("Address: " + safe_text(settings.INVOICE_COMPANY_ADDRESS))
    w.gap(12)
    if settings.INVOICE_COMPANY_PHONE:
        w.text("Phone: " + safe_text(settings.INVOICE_COMPANY_PHONE))
        w.gap(12)
    w.text("Email: " + safe_text(settings.INVOICE_COMPANY_EMAIL))
    w.gap(12)
    if settings.INVOICE_GST_TAX_ID:
        w.text("GST / Tax ID: " + safe_text(settings.INVOICE_GST_TAX_ID))
        w.gap(12)

    verify_url = f"{settings.INVOICE_VERIFY_URL_BASE.rstrip('/')}/{number}"
    c.drawImage(_qr_image(verify_url), A4[0] - 150, A4[1] - 150, width=100, height=100)
    w.gap(8)

    w.section("Invoice Number: " + number)
    w.line("Invoice Date:", _fmt_date(now))
    w.line("Due Date:", _fmt_date(now + timedelta(days=settings.INVOICE_PAYMENT_DAYS)))
    w.gap(8)

    client = event.booked_by
    w.section("Bill To (Client Details)")
    w.line("Client Name:", client.name if client else None)
    w.line("Address:", ", ".join(p for p in (event.address_line, event.city, event.pincode) if p))
    w.line("Phone:", client.phone if client else None)
    w.line("Email:", client.email if client else None)
    w.gap(8)

    where = f"{event.venue}, {event.city}" if event.venue else ", ".join(p for p in (event.address_line, event.city) if p)
    w.section("Event Details")
    w.line("Event Name:", event.title)
    w.line("Event Date:", _fmt_date(event.scheduled_at))
    w.line("Event Location:", where)
    w.line("Guests:", event.guest_count)
    w.gap(10)

    # services table
    cols = (50, 80, 320, 380, 450)
    w.text("Services & Charges", size=10, bold=True)
    w.gap(16)
    for x, head in zip(cols, ("No.", "Description of Service", "Qty", "Rate", "Amount")):
        w.text(head, x=x, size=8)
    w.gap(6)
    c.line(50, w.y, 520, w.y)
    w.gap(12)
    for i, desc in enumerate(service_lines(event), start=1):
        for x, val in zip(cols, (str(i), safe_text(desc)[:45], "1", "As per quote", "-")):
            w.text(val, x=x)
        w.gap(14)
    c.line(cols[1], w.y + 6, 520, w.y + 6)
    w.gap(6)
    for label in ("Subtotal", "Tax (if applicable)", "Total Amount"):
        w.text(label, x=cols[1], bold=label == "Total Amount")
        w.text("-", x=cols[4])
        w.gap(12)
    w.gap(12)

    w.section("Payment Details")
    w.line("Bank Name:", settings.INVOICE_BANK_NAME)
    w.line("Account Name:", settings.INVOICE_ACCOUNT_NAME)
    w.line("Account Number:", settings.INVOICE_ACCOUNT_NUMBER)
    w.line("IFSC / SWIFT:", settings.INVOICE_IFSC_SWIFT)
    w.text("Payment Method: (Bank Transfer / Cash / Online)")
    w.gap(22)

    w.section("Notes / Terms")
    w.text(f"Payment due within {settings.INVOICE_PAYMENT_DAYS} days.")
    w.gap(14)
    w.text("Advance received (if any): ______")
    w.gap(12)
    w.text("Balance payable: ______")
    w.gap(28)
    w.text("Authorized Signature:")
    w.gap(12)
    w.text("(Name & Signature)")
    w.gap(10)
    w.text("Event Manager / Company Seal")

    c.showPage()
    c.save()
    return buf.getvalue()
