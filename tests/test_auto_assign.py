# tests/test_auto_assign.py
from datetime import timedelta

from sqlalchemy import select

from movment.models.enums import Role
from movment.models.event import Event
from movment.models.notification import Notification
from movment.services import lifecycle
from movment.services.auto_assign import find_manager_for_city, run_auto_assign_once

from tests.conftest import NOW

AFTER_DEADLINE = NOW + timedelta(minutes=16)


def test_deadline_in_future_is_left_alone(db, make_user, make_event):
    make_user(Role.MANAGER.value, city="Chennai")
    ev = make_event(make_user())

    assert run_auto_assign_once(db, NOW + timedelta(minutes=14)) == 0
    db.refresh(ev)
    assert ev.status == "pending"
    assert ev.assigned_manager_id is None


def test_chennai_scenario(db, make_user, make_event):
    ev = make_event(make_user(), scheduledAt=(NOW + timedelta(hours=2)).isoformat(), city="Chennai")

    # nobody in Chennai yet: stays pending, retried later
    make_user(Role.MANAGER.value, city="Mumbai")
    assert run_auto_assign_once(db, AFTER_DEADLINE) == 0
    db.refresh(ev)
    assert ev.status == "pending"

    manager = make_user(Role.MANAGER.value, city="Chennai")
    assert run_auto_assign_once(db, AFTER_DEADLINE + timedelta(minutes=1)) == 1
    db.refresh(ev)
    assert ev.status == "accepted"
    assert ev.assigned_manager_id == manager.id
    assert ev.status_history[-1].status == "accepted"
    assert ev.status_history[-1].by_id is None

    note = db.scalar(select(Notification).where(Notification.user_id == manager.id))
    assert note.title == "New event assigned"
    assert note.type == "update"
    assert note.related_event_id == ev.id


def test_city_match_ignores_case_and_spaces(db, make_user):
    m = make_user(Role.MANAGER.value, city="  chennai ")
    assert find_manager_for_city(db, "CHENNAI").id == m.id
    assert find_manager_for_city(db, "") is None
    assert find_manager_for_city(db, None) is None


def test_picks_lowest_id_approved_manager(db, make_user):
    make_user(Role.MANAGER.value, city="Pune", approved=False)
    first = make_user(Role.MANAGER.value, city="Pune")
    make_user(Role.MANAGER.value, city="Pune")
    make_user(Role.ADMIN.value, city="Pune")
    assert find_manager_for_city(db, "Pune").id == first.id


def test_manual_accept_wins_over_tick(db, make_user, make_event):
    make_user(Role.MANAGER.value, city="Chennai")
    ev = make_event(make_user())
    manual = make_user(Role.MANAGER.value, city="Delhi")
    lifecycle.accept_event(db, manual, ev.id, now=NOW + timedelta(minutes=5))

    assert run_auto_assign_once(db, AFTER_DEADLINE) == 0
    db.refresh(ev)
    assert ev.assigned_manager_id == manual.id
    assert [h.status for h in ev.status_history] == ["pending", "accepted"]


def test_one_bad_event_does_not_stop_the_batch(db, make_user, make_event, monkeypatch):
    make_user(Role.MANAGER.value, city="Chennai")
    owner = make_user()
    bad = make_event(owner, title="bad")
    good = make_event(owner, title="good")

    from movment.services import auto_assign
    real_assign = auto_assign._assign

    def flaky(db_, event, now):
        if event.id == bad.id:
            raise RuntimeError("boom")
        return real_assign(db_, event, now)

    monkeypatch.setattr(auto_assign, "_assign", flaky)
    assert run_auto_assign_once(db, AFTER_DEADLINE) == 1
    statuses = dict(db.execute(select(Event.id, Event.status)).all())
    assert statuses[bad.id] == "pending"
    assert statuses[good.id] == "accepted"
