# tests/test_lifecycle.py
from datetime import timedelta

import pytest
from sqlalchemy import select

from movment.core.errors import NotFound, PermissionDenied, StateConflict, ValidationFailed
from movment.models.enums import Role
from movment.models.notification import Notification
from movment.models.user_activity import UserActivity
from movment.schemas.event import EventCreate
from movment.services import lifecycle

from tests.conftest import NOW, event_payload


def test_transition_table():
    assert lifecycle.can_transition("pending", "accepted")
    assert lifecycle.can_transition("pending", "cancelled")
    assert lifecycle.can_transition("accepted", "in_progress")
    assert lifecycle.can_transition("in_progress", "completed")
    assert not lifecycle.can_transition("pending", "in_progress")
    assert not lifecycle.can_transition("in_progress", "cancelled")
    assert not lifecycle.can_transition("completed", "cancelled")
    assert not lifecycle.can_transition("cancelled", "pending")


def test_create_event_sets_pending_deadline_and_confirmation(db, make_user, make_event):
    user = make_user()
    ev = make_event(user)

    assert ev.status == "pending"
    assert ev.auto_assign_deadline == NOW + timedelta(minutes=15)
    assert [h.status for h in ev.status_history] == ["pending"]
    assert ev.status_history[0].by_id == user.id
    assert ev.additional_services[0] == {"service": "decoration", "description": "", "image": ""}
    assert ev.location["city"] == "Chennai"

    notes = db.scalars(select(Notification).where(Notification.user_id == user.id)).all()
    assert len(notes) == 1
    assert notes[0].type == "booking_confirmation"
    assert notes[0].title == "Booking confirmed"
    assert notes[0].related_event_id == ev.id

    actions = db.scalars(select(UserActivity.action).where(UserActivity.user_id == user.id)).all()
    assert actions == ["booking_created"]


@pytest.mark.parametrize("missing", ["type", "title", "scheduledAt", "addressLine", "city", "pincode"])
def test_create_event_requires_fields(db, make_user, missing):
    body = event_payload()
    body.pop(missing)
    with pytest.raises(ValidationFailed, match="Missing required fields"):
        lifecycle.create_event(db, make_user(), EventCreate.model_validate(body), now=NOW)


@pytest.mark.parametrize("field", ["title", "city", "addressLine"])
def test_create_event_rejects_blank_text(db, make_user, field):
    body = event_payload(**{field: "   "})
    with pytest.raises(ValidationFailed, match="Missing required fields"):
        lifecycle.create_event(db, make_user(), EventCreate.model_validate(body), now=NOW)


def test_create_event_rejects_unknown_type(db, make_user):
    with pytest.raises(ValidationFailed, match="Invalid event type"):
        lifecycle.create_event(db, make_user(), EventCreate.model_validate(event_payload(type="wedding")), now=NOW)


def test_accept_is_first_wins(db, make_user, make_event):
    ev = make_event(make_user())
    m1 = make_user(Role.MANAGER.value, city="Chennai")
    m2 = make_user(Role.MANAGER.value, city="Chennai")

    accepted = lifecycle.accept_event(db, m1, ev.id, now=NOW)
    assert accepted.status == "accepted"
    assert accepted.assigned_manager_id == m1.id

    with pytest.raises(StateConflict, match="Event is not in pending status"):
        lifecycle.accept_event(db, m2, ev.id, now=NOW)
    db.refresh(ev)
    assert ev.assigned_manager_id == m1.id
    assert [h.status for h in ev.status_history] == ["pending", "accepted"]


def test_accept_unknown_event(db, make_user):
    with pytest.raises(NotFound):
        lifecycle.accept_event(db, make_user(Role.MANAGER.value), 999)


def test_full_progression_records_history(db, make_user, make_event):
    ev = make_event(make_user())
    manager = make_user(Role.MANAGER.value)
    lifecycle.accept_event(db, manager, ev.id, now=NOW)
    lifecycle.advance_status(db, manager, ev.id, "in_progress", now=NOW + timedelta(days=5))
    done = lifecycle.advance_status(db, manager, ev.id, "completed", now=NOW + timedelta(days=5, hours=4))

    assert done.status == "completed"
    assert [h.status for h in done.status_history] == ["pending", "accepted", "in_progress", "completed"]
    assert all(h.by_id == manager.id for h in done.status_history[1:])


def test_advance_rejects_skipping_states(db, make_user, make_event):
    ev = make_event(make_user())
    admin = make_user(Role.ADMIN.value)
    with pytest.raises(StateConflict, match="Cannot change status from pending to in_progress"):
        lifecycle.advance_status(db, admin, ev.id, "in_progress")


def test_advance_rejects_unknown_target(db, make_user, make_event):
    ev = make_event(make_user())
    with pytest.raises(ValidationFailed, match="Invalid status"):
        lifecycle.advance_status(db, make_user(Role.ADMIN.value), ev.id, "accepted")


def test_advance_only_by_assigned_manager_or_admin(db, make_user, make_event):
    ev = make_event(make_user())
    assigned = make_user(Role.MANAGER.value)
    other = make_user(Role.MANAGER.value)
    lifecycle.accept_event(db, assigned, ev.id, now=NOW)

    with pytest.raises(PermissionDenied):
        lifecycle.advance_status(db, other, ev.id, "in_progress")

    ev = lifecycle.advance_status(db, make_user(Role.ADMIN.value), ev.id, "in_progress")
    assert ev.status == "in_progress"


def test_cancel_only_own_and_only_early(db, make_user, make_event):
    owner = make_user()
    ev = make_event(owner)

    with pytest.raises(PermissionDenied, match="You can only cancel your own events"):
        lifecycle.cancel_event(db, make_user(), ev.id)

    manager = make_user(Role.MANAGER.value)
    lifecycle.accept_event(db, manager, ev.id, now=NOW)
    lifecycle.advance_status(db, manager, ev.id, "in_progress", now=NOW)
    with pytest.raises(StateConflict, match="Event cannot be cancelled in current status"):
        lifecycle.cancel_event(db, owner, ev.id)


def test_cancel_completed_event_fails(db, make_user, make_event):
    owner = make_user()
    ev = make_event(owner)
    manager = make_user(Role.MANAGER.value)
    lifecycle.accept_event(db, manager, ev.id, now=NOW)
    lifecycle.advance_status(db, manager, ev.id, "in_progress", now=NOW)
    lifecycle.advance_status(db, manager, ev.id, "completed", now=NOW)

    with pytest.raises(StateConflict, match="Event cannot be cancelled in current status"):
        lifecycle.cancel_event(db, owner, ev.id)
    db.refresh(ev)
    assert ev.status == "completed"


def test_cancel_accepted_event(db, make_user, make_event):
    owner = make_user()
    ev = make_event(owner)
    lifecycle.accept_event(db, make_user(Role.MANAGER.value), ev.id, now=NOW)
    ev = lifecycle.cancel_event(db, owner, ev.id, now=NOW + timedelta(hours=1))
    assert ev.status == "cancelled"
    assert ev.status_history[-1].status == "cancelled"
    assert ev.status_history[-1].by_id == owner.id


def test_reschedule(db, make_user, make_event):
    owner = make_user()
    ev = make_event(owner)

    with pytest.raises(ValidationFailed, match="New date/time required"):
        lifecycle.reschedule_event(db, owner, ev.id, None)

    new_when = NOW + timedelta(days=9)
    ev = lifecycle.reschedule_event(db, owner, ev.id, new_when, now=NOW)
    assert ev.scheduled_at == new_when
    assert ev.status == "pending"
    assert len(ev.status_history) == 1


def test_reschedule_completed_event_fails(db, make_user, make_event):
    owner = make_user()
    ev = make_event(owner)
    admin = make_user(Role.ADMIN.value)
    lifecycle.accept_event(db, admin, ev.id, now=NOW)
    lifecycle.advance_status(db, admin, ev.id, "in_progress")
    lifecycle.advance_status(db, admin, ev.id, "completed")
    with pytest.raises(StateConflict):
        lifecycle.reschedule_event(db, owner, ev.id, NOW + timedelta(days=20))
