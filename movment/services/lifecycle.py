# movment/services/lifecycle.py
"""
Event state machine.

Every status change goes through a compare-and-set UPDATE (``WHERE status =
<expected>``) and commits together with its history row, so two racing
actors cannot both win the same transition.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from movment.core.config import settings
from movment.core.errors import NotFound, PermissionDenied, StateConflict, ValidationFailed
from movment.db.types import utcnow
from movment.models.enums import ActivityAction, ELEVATED_ROLES, EventStatus, EventType, NotificationType
from movment.models.event import Event, EventStatusChange
from movment.models.user import User
from movment.schemas.event import EventCreate
from movment.services.activity import record_activity
from movment.services.notifications import booking_confirmation_body, notify

logger = logging.getLogger(__name__)

PENDING = EventStatus.PENDING.value
ACCEPTED = EventStatus.ACCEPTED.value
IN_PROGRESS = EventStatus.IN_PROGRESS.value
COMPLETED = EventStatus.COMPLETED.value
CANCELLED = EventStatus.CANCELLED.value

TRANSITIONS: Dict[str, frozenset] = {
    PENDING: frozenset({ACCEPTED, CANCELLED}),
    ACCEPTED: frozenset({IN_PROGRESS, CANCELLED}),
    IN_PROGRESS: frozenset({COMPLETED}),
    COMPLETED: frozenset(),
    CANCELLED: frozenset(),
}

ADVANCE_TARGETS = frozenset({IN_PROGRESS, COMPLETED, CANCELLED})
OWNER_MUTABLE = (PENDING, ACCEPTED)
EVENT_TYPES = [t.value for t in EventType]


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in TRANSITIONS.get(from_status, frozenset())


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFound("Event not found")
    return event


def compare_and_set(db: Session, event_id: int, expected: str | tuple, **values: Any) -> bool:
    """Conditional UPDATE on the status column. True when this caller won."""
    stmt = update(Event).where(Event.id == event_id)
    if isinstance(expected, tuple):
        stmt = stmt.where(Event.status.in_(expected))
    else:
        stmt = stmt.where(Event.status == expected)
    result = db.execute(stmt.values(**values).execution_options(synchronize_session=False))
    return result.rowcount == 1


def append_history(db: Session, event_id: int, status: str, at: datetime, by_id: Optional[int]) -> EventStatusChange:
    row = EventStatusChange(event_id=event_id, status=status, at=at, by_id=by_id)
    db.add(row)
    return row


def _reload(db: Session, event: Event) -> Event:
    db.refresh(event)
    db.refresh(event, attribute_names=["status_history"])
    return event


def normalize_services(raw: List[Any]) -> List[Dict[str, str]]:
    out: List[Dict[str, str]] = []
    for item in raw or []:
        if isinstance(item, str):
            entry = {"service": item, "description": "", "image": ""}
        elif isinstance(item, dict):
            entry = {
                "service": str(item.get("service") or ""),
                "description": str(item.get("description") or ""),
                "image": str(item.get("image") or ""),
            }
        else:
            continue
        if entry["service"]:
            out.append(entry)
    return out

# ---------------------------
# Operations
# ---------------------------

def create_event(db: Session, owner: User, data: EventCreate, now: Optional[datetime] = None) -> Event:
    now = now or utcnow()
    required = (data.type, data.title, data.address_line, data.city, data.pincode)
    if data.scheduled_at is None or not all(v and v.strip() for v in required):
        raise ValidationFailed("Missing required fields")
    if data.type not in EVENT_TYPES:
        raise ValidationFailed("Invalid event type")

    has_coords = data.lat is not None and data.lng is not None
    event = Event(
        booked_by_id=owner.id,
        type=data.type,
        title=data.title.strip(),
        description=data.description,
        scheduled_at=_aware(data.scheduled_at),
        guest_count=max(1, data.guest_count or 1),
        venue=data.venue.strip() if data.venue and data.venue.strip() else None,
        address_line=data.address_line,
        city=data.city.strip(),
        pincode=data.pincode,
        landmark=data.landmark,
        lat=data.lat if has_coords else None,
        lng=data.lng if has_coords else None,
        map_link=data.map_link.strip() if data.map_link and data.map_link.strip() else None,
        additional_services=normalize_services(data.additional_services),
        custom_requests=data.custom_requests.strip() if data.custom_requests else None,
        status=PENDING,
        auto_assign_deadline=now + timedelta(minutes=settings.AUTO_ASSIGN_DELAY_MINUTES),
        created_at=now,
        updated_at=now,
    )
    db.add(event)
    db.flush()

    append_history(db, event.id, PENDING, now, owner.id)
    notify(
        db,
        owner.id,
        NotificationType.BOOKING_CONFIRMATION.value,
        "Booking confirmed",
        booking_confirmation_body(event),
        event=event,
        created_at=now,
    )
    record_activity(db, owner.id, ActivityAction.BOOKING_CREATED.value, entity_type="Event", entity_id=event.id)
    db.commit()
    logger.info("Event %s created by user %s (%s, %s)", event.id, owner.id, event.type, event.city)
    return _reload(db, event)


def accept_event(db: Session, actor: User, event_id: int, now: Optional[datetime] = None) -> Event:
    now = now or utcnow()
    event = get_event(db, event_id)
    if not compare_and_set(db, event_id, PENDING, status=ACCEPTED, assigned_manager_id=actor.id, updated_at=now):
        db.rollback()
        raise StateConflict("Event is not in pending status")
    append_history(db, event_id, ACCEPTED, now, actor.id)
    db.commit()
    logger.info("Event %s accepted by %s", event_id, actor.id)
    return _reload(db, event)


def advance_status(db: Session, actor: User, event_id: int, target: str, now: Optional[datetime] = None) -> Event:
    now = now or utcnow()
    if target not in ADVANCE_TARGETS:
        raise ValidationFailed("Invalid status")
    event = get_event(db, event_id)
    if actor.role not in ELEVATED_ROLES and event.assigned_manager_id != actor.id:
        raise PermissionDenied("Only the assigned manager can update this event")

    current = event.status
    if not can_transition(current, target):
        raise StateConflict(f"Cannot change status from {current} to {target}")
    if not compare_and_set(db, event_id, current, status=target, updated_at=now):
        db.rollback()
        raise StateConflict("Event status changed concurrently, reload and retry")
    append_history(db, event_id, target, now, actor.id)
    db.commit()
    logger.info("Event %s: %s -> %s by %s", event_id, current, target, actor.id)
    return _reload(db, event)


def cancel_event(db: Session, actor: User, event_id: int, now: Optional[datetime] = None) -> Event:
    now = now or utcnow()
    event = get_event(db, event_id)
    if event.booked_by_id != actor.id:
        raise PermissionDenied("You can only cancel your own events")
    if event.status not in OWNER_MUTABLE:
        raise StateConflict("Event cannot be cancelled in current status")
    if not compare_and_set(db, event_id, event.status, status=CANCELLED, updated_at=now):
        db.rollback()
        raise StateConflict("Event cannot be cancelled in current status")
    append_history(db, event_id, CANCELLED, now, actor.id)
    record_activity(db, actor.id, ActivityAction.BOOKING_CANCELLED.value, entity_type="Event", entity_id=event_id)
    db.commit()
    return _reload(db, event)


def reschedule_event(
    db: Session, actor: User, event_id: int, scheduled_at: Optional[datetime], now: Optional[datetime] = None
) -> Event:
    now = now or utcnow()
    if scheduled_at is None:
        raise ValidationFailed("New date/time required")
    event = get_event(db, event_id)
    if event.booked_by_id != actor.id:
        raise PermissionDenied("You can only reschedule your own events")
    if event.status not in OWNER_MUTABLE:
        raise StateConflict("Event cannot be rescheduled in current status")
    if not compare_and_set(db, event_id, OWNER_MUTABLE, scheduled_at=_aware(scheduled_at), updated_at=now):
        db.rollback()
        raise StateConflict("Event cannot be rescheduled in current status")
    record_activity(
        db,
        actor.id,
        ActivityAction.BOOKING_RESCHEDULED.value,
        entity_type="Event",
        entity_id=event_id,
        details={"scheduledAt": _aware(scheduled_at).isoformat()},
    )
    db.commit()
    return _reload(db, event)
