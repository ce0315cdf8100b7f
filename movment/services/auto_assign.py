# movment/services/auto_assign.py
"""
Hands pending events that nobody accepted in time to a manager in the same city.

Runs from the scheduler once per AUTO_ASSIGN_INTERVAL_SECONDS. Events without a
city, or without an approved manager in that city, stay pending and are
retried on the next tick.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from movment.models.enums import EventStatus, NotificationType, Role
from movment.models.event import Event
from movment.models.user import User
from movment.services.lifecycle import ACCEPTED, PENDING, append_history, compare_and_set
from movment.services.notifications import format_when, notify

logger = logging.getLogger(__name__)


def find_manager_for_city(db: Session, city: Optional[str]) -> Optional[User]:
    """Lowest-id approved manager whose city matches (trimmed, case-insensitive)."""
    key = (city or "").strip().lower()
    if not key:
        return None
    stmt = (
        select(User)
        .where(
            User.role == Role.MANAGER.value,
            User.approved.is_(True),
            func.lower(func.trim(User.city)) == key,
        )
        .order_by(User.id)
        .limit(1)
    )
    return db.scalar(stmt)


def _assign(db: Session, event: Event, now: datetime) -> bool:
    manager = find_manager_for_city(db, event.city)
    if manager is None:
        logger.debug("No manager in %r for event %s, retrying next tick", event.city, event.id)
        return False

    # a manual accept that landed first wins; the event is left alone
    if not compare_and_set(db, event.id, PENDING, status=ACCEPTED, assigned_manager_id=manager.id, updated_at=now):
        db.rollback()
        return False

    append_history(db, event.id, ACCEPTED, now, None)
    notify(
        db,
        manager.id,
        NotificationType.UPDATE.value,
        "New event assigned",
        f'"{event.title}" in {event.city} on {format_when(event.scheduled_at)} was assigned to you.',
        event=event,
        created_at=now,
    )
    db.commit()
    logger.info("Auto-assigned event %s to manager %s", event.id, manager.id)
    return True


def run_auto_assign_once(db: Session, now: datetime) -> int:
    """One scheduler tick. Returns how many events were assigned."""
    due_ids = list(
        db.scalars(
            select(Event.id)
            .where(Event.status == EventStatus.PENDING.value, Event.auto_assign_deadline <= now)
            .order_by(Event.auto_assign_deadline, Event.id)
        ).all()
    )
    assigned = 0
    for event_id in due_ids:
        try:
            event = db.get(Event, event_id)
            if event is None or not (event.city or "").strip():
                continue
            if _assign(db, event, now):
                assigned += 1
        except Exception:
            db.rollback()
            logger.exception("Auto-assign failed for event %s", event_id)
    if due_ids:
        logger.info("Auto-assign tick: %d due, %d assigned", len(due_ids), assigned)
    return assigned
