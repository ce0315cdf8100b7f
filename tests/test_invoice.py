# tests/test_invoice.py
from movment.models.event import Event
from movment.models.payment import Payment
from movment.services import invoice

from tests.conftest import NOW


def test_invoice_number_is_last_eight_digits(make_user, make_event):
    ev = make_event(make_user())
    assert invoice.invoice_number(ev) == f"INV-{ev.id:08d}"
    assert invoice.invoice_number(Event(id=1234567890)) == "INV-34567890"


def test_safe_text():
    assert invoice.safe_text(None) == "-"
    assert invoice.safe_text("   ") == "-"
    assert invoice.safe_text("line one\nline\ttwo") == "line one line two"
    assert invoice.safe_text("a\x07b") == "ab"


def test_service_lines_append_custom_services(make_user, make_event):
    ev = make_event(make_user(), additionalServices=["decoration", "fireworks"])
    lines = invoice.service_lines(ev)
    standard = [label for label, _ in invoice.SERVICE_ROWS]
    assert lines[: len(standard)] == standard
    assert lines[len(standard):] == ["fireworks"]


def test_build_invoice_sums_settled_payments(make_user, make_event):
    owner = make_user()
    ev = make_event(owner)
    payments = [
        Payment(user_id=owner.id, event_id=ev.id, amount=1000, refunded_amount=0, status="completed"),
        Payment(user_id=owner.id, event_id=ev.id, amount=500, refunded_amount=200, status="partially_refunded"),
        Payment(user_id=owner.id, event_id=ev.id, amount=999, refunded_amount=0, status="failed"),
    ]
    data = invoice.build_invoice(ev, payments)
    assert data["amountPaid"] == 1300
    assert data["invoiceNumber"] == invoice.invoice_number(ev)
    assert data["location"]["pincode"] == "600001"
    assert data["assignedManager"] is None


def test_render_pdf(make_user, make_event):
    ev = make_event(make_user(), title="Launch — v2\nfinal", venue="Hall A")
    pdf = invoice.render_invoice_pdf(ev, now=NOW)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000
