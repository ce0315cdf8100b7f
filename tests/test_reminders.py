# tests/test_reminders.py
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from movment.models.enums import Role
from movment.models.notification import Notification
from movment.services import lifecycle, notifications
from movment.services.reminders import claim_reminder, run_reminders_once

from tests.conftest import NOW


def _accepted_event(db, make_user, make_event, hours_ahead: float):
    owner = make_user()
    ev = make_event(owner, scheduledAt=(NOW + timedelta(hours=hours_ahead)).isoformat())
    lifecycle.accept_event(db, make_user(Role.MANAGER.value), ev.id, now=NOW)
    return owner, ev


def _reminders_for(db, user_id: int) -> int:
    return db.scalar(
        select(func.count(Notification.id)).where(Notification.user_id == user_id, Notification.type == "reminder")
    )


def test_exactly_one_reminder_across_ticks(db, make_user, make_event):
    owner, ev = _accepted_event(db, make_user, make_event, hours_ahead=12)

    assert run_reminders_once(db, NOW) == 1
    for hours in (1, 2, 6):
        assert run_reminders_once(db, NOW + timedelta(hours=hours)) == 0

    assert _reminders_for(db, owner.id) == 1
    db.refresh(ev)
    assert ev.reminder_sent_at == NOW


def test_outside_window_or_wrong_status_is_skipped(db, make_user, make_event):
    far_owner, _ = _accepted_event(db, make_user, make_event, hours_ahead=48)
    pending_owner = make_user()
    make_event(pending_owner, scheduledAt=(NOW + timedelta(hours=3)).isoformat())

    assert run_reminders_once(db, NOW) == 0
    assert _reminders_for(db, far_owner.id) == 0
    assert _reminders_for(db, pending_owner.id) == 0


def test_claim_is_single_winner(db, make_user, make_event):
    _, ev = _accepted_event(db, make_user, make_event, hours_ahead=5)
    assert claim_reminder(db, ev.id, NOW) is True
    db.commit()
    assert claim_reminder(db, ev.id, NOW + timedelta(minutes=1)) is False


def test_failed_commit_sends_no_email_and_retry_sends_one(db, make_user, make_event, monkeypatch):
    owner, ev = _accepted_event(db, make_user, make_event, hours_ahead=6)
    sent = []
    monkeypatch.setattr(notifications, "send_email", lambda to, subject, body: sent.append((to, subject)))

    real_commit = db.commit
    commits = {"n": 0}

    def flaky_commit():
        commits["n"] += 1
        if commits["n"] == 1:
            raise OperationalError("COMMIT", {}, Exception("database is locked"))
        real_commit()

    monkeypatch.setattr(db, "commit", flaky_commit)

    assert run_reminders_once(db, NOW) == 0
    assert sent == []
    assert _reminders_for(db, owner.id) == 0

    assert run_reminders_once(db, NOW + timedelta(minutes=1)) == 1
    assert sent == [(owner.email, "Event reminder")]
    assert _reminders_for(db, owner.id) == 1


def test_email_waits_for_commit(db, make_user, monkeypatch):
    sent = []
    monkeypatch.setattr(notifications, "send_email", lambda *a: sent.append(a))
    user = make_user()
    notifications.notify(db, user.id, "reminder", "Event reminder", "soon")
    db.flush()
    assert sent == []

    db.rollback()
    db.commit()
    assert sent == []

    notifications.notify(db, user.id, "reminder", "Event reminder", "soon")
    db.commit()
    assert len(sent) == 1
