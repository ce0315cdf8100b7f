# movment/services/reminders.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from movment.core.config import settings
from movment.models.enums import EventStatus, NotificationType
from movment.models.event import Event
from movment.services.notifications import format_when, notify

logger = logging.getLogger(__name__)

REMINDABLE = (EventStatus.ACCEPTED.value, EventStatus.IN_PROGRESS.value)


def claim_reminder(db: Session, event_id: int, now: datetime) -> bool:
    """Sets reminder_sent_at only while it is still NULL; True for the caller that set it."""
    result = db.execute(
        update(Event)
        .where(Event.id == event_id, Event.reminder_sent_at.is_(None))
        .values(reminder_sent_at=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def run_reminders_once(db: Session, now: datetime) -> int:
    """One scheduler tick. Returns how many reminders were created."""
    horizon = now + timedelta(hours=settings.REMINDER_WINDOW_HOURS)
    events = db.scalars(
        select(Event)
        .where(
            Event.status.in_(REMINDABLE),
            Event.scheduled_at >= now,
            Event.scheduled_at <= horizon,
            Event.reminder_sent_at.is_(None),
        )
        .order_by(Event.scheduled_at)
    ).all()

    sent = 0
    for event in events:
        try:
            if not claim_reminder(db, event.id, now):
                db.rollback()
                continue
            notify(
                db,
                event.booked_by_id,
                NotificationType.REMINDER.value,
                "Event reminder",
                f'Your event "{event.title}" is scheduled for {format_when(event.scheduled_at)}.',
                event=event,
                created_at=now,
            )
            db.commit()
            sent += 1
        except Exception:
            db.rollback()
            logger.exception("Reminder failed for event %s", event.id)
    if events:
        logger.info("Reminder tick: %d candidates, %d sent", len(events), sent)
    return sent
