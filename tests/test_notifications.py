# tests/test_notifications.py
from movment.models.enums import Role
from movment.services import notifications

from tests.conftest import NOW


def test_booking_confirmation_is_emailed(db, make_user, make_event, monkeypatch):
    sent = []
    monkeypatch.setattr(notifications, "send_email", lambda to, subject, body: sent.append((to, subject, body)))
    owner = make_user(name="Meena")
    ev = make_event(owner, title="Meena & Co <launch>")

    assert len(sent) == 1
    to, subject, body = sent[0]
    assert to == owner.email
    assert subject == "Booking confirmed"
    assert body.startswith("Hi Meena,")
    # plain-text mail, nothing escaped
    assert "Event: Meena & Co <launch>" in body
    assert "Where: 12 Beach Road, Chennai 600001" in body
    assert notifications.format_when(ev.scheduled_at) in body


def test_updates_are_not_emailed(db, make_user, monkeypatch):
    sent = []
    monkeypatch.setattr(notifications, "send_email", lambda *a: sent.append(a))
    m = make_user(Role.MANAGER.value)
    n = notifications.notify(db, m.id, "update", "New event assigned", "x")
    db.commit()
    assert sent == []
    assert n.id is not None
    assert n.read is False


def test_notify_many_dedupes(db, make_user):
    a, b = make_user(), make_user()
    rows = notifications.notify_many(db, [a.id, b.id, a.id], "offer", "Sale")
    db.commit()
    assert [r.user_id for r in rows] == [a.id, b.id]


def test_format_when():
    assert notifications.format_when(NOW) == "10 Mar 2026, 09:00 UTC"
