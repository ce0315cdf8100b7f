# movment/api/v1/manager.py
import calendar
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from movment.core.errors import NotFound, PermissionDenied, ValidationFailed
from movment.core.rbac import require_staff
from movment.crud.resource import resource_crud
from movment.db.session import get_db
from movment.db.types import utcnow
from movment.models.conversation import ManagerConversation
from movment.models.enums import ELEVATED_ROLES, EventStatus, NotificationType, ResourceType
from movment.models.event import Event
from movment.models.feedback import Feedback
from movment.models.notification import Notification
from movment.models.resource import Resource
from movment.models.user import User
from movment.schemas.conversation import ConversationIn, ConversationOut, MessageIn, MessageOut
from movment.schemas.event import EventOut, EventWithPeople, NearbyEventOut, TeamIn
from movment.schemas.feedback import FeedbackOut, FeedbackReplyIn
from movment.schemas.notification import NotificationOut
from movment.schemas.resource import ResourceIn, ResourceOut, ResourceUpdate
from movment.schemas.user import ManagerLocationIn
from movment.services import analytics, conversations
from movment.services.feedback import reply_to_feedback
from movment.services.geo import clamp, haversine_km
from movment.services.lifecycle import get_event
from movment.services.notifications import format_when, notify

router = APIRouter()

ALL_STATUSES = {s.value for s in EventStatus}
DEFAULT_LIST_STATUSES = (EventStatus.ACCEPTED.value, EventStatus.IN_PROGRESS.value, EventStatus.COMPLETED.value)


def _own_event(db: Session, event_id: int, user: User) -> Event:
    event = get_event(db, event_id)
    if event.assigned_manager_id != user.id and user.role not in ELEVATED_ROLES:
        raise PermissionDenied("Not your event")
    return event

# ---------------------------
# Events
# ---------------------------

@router.get("/events", response_model=List[EventWithPeople])
def my_events(
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    type: Optional[str] = None,
    city: Optional[str] = None,
    status_: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    stmt = select(Event).where(Event.assigned_manager_id == user.id)
    if status_ in ALL_STATUSES:
        stmt = stmt.where(Event.status == status_)
    else:
        stmt = stmt.where(Event.status.in_(DEFAULT_LIST_STATUSES))
    if type:
        stmt = stmt.where(Event.type == type)
    if city:
        stmt = stmt.where(func.lower(Event.city).contains(city.strip().lower()))
    if date_from:
        stmt = stmt.where(Event.scheduled_at >= date_from)
    if date_to:
        stmt = stmt.where(Event.scheduled_at <= date_to)
    return db.scalars(stmt.order_by(Event.scheduled_at)).all()

@router.get("/events/calendar", response_model=List[EventOut])
def events_calendar(
    year: Optional[int] = None,
    month: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    if month is None or not 1 <= month <= 12:
        raise ValidationFailed("Invalid month")
    year = year or utcnow().year
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year, month, last_day, 23, 59, 59, tzinfo=timezone.utc)
    stmt = (
        select(Event)
        .where(
            Event.assigned_manager_id == user.id,
            Event.scheduled_at >= start,
            Event.scheduled_at <= end,
            Event.status != EventStatus.CANCELLED.value,
        )
        .order_by(Event.scheduled_at)
    )
    return db.scalars(stmt).all()

@router.get("/events/nearby", response_model=List[NearbyEventOut], dependencies=[Depends(require_staff)])
def nearby_events(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius_km: Optional[float] = Query(None, alias="radiusKm"),
    db: Session = Depends(get_db),
):
    radius = clamp(radius_km or 20, 5, 100)
    rows = db.scalars(select(Event).where(Event.status == EventStatus.PENDING.value).order_by(Event.scheduled_at)).all()
    if lat is None or lng is None:
        return rows
    out = []
    for ev in rows:
        if ev.lat is None or ev.lng is None:
            continue
        dist = haversine_km(lat, lng, ev.lat, ev.lng)
        if dist <= radius:
            item = NearbyEventOut.model_validate(ev)
            item.distance_km = round(dist, 2)
            out.append(item)
    return sorted(out, key=lambda e: e.distance_km)

@router.post("/events/{event_id}/team", response_model=EventOut)
def assign_team(event_id: int, body: TeamIn, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    event = _own_event(db, event_id, user)
    event.assigned_team = body.names()
    db.commit(); db.refresh(event)
    return event

@router.post("/events/{event_id}/remind")
def remind_me(event_id: int, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    event = _own_event(db, event_id, user)
    notify(
        db,
        user.id,
        NotificationType.REMINDER.value,
        "Event reminder",
        f"{event.title} - {format_when(event.scheduled_at)} at {event.city}",
        event=event,
    )
    db.commit()
    return {"message": "Reminder set"}

@router.get("/notifications", response_model=List[NotificationOut])
def my_notifications(db: Session = Depends(get_db), user: User = Depends(require_staff)):
    stmt = select(Notification).where(Notification.user_id == user.id).order_by(Notification.created_at.desc(), Notification.id.desc()).limit(50)
    return db.scalars(stmt).all()

# ---------------------------
# Conversations
# ---------------------------

@router.get("/conversations", response_model=List[ConversationOut])
def list_conversations(db: Session = Depends(get_db), user: User = Depends(require_staff)):
    stmt = select(ManagerConversation).where(ManagerConversation.manager_id == user.id).order_by(ManagerConversation.updated_at.desc())
    return db.scalars(stmt).all()

@router.post("/conversations", response_model=ConversationOut)
def start_conversation(body: ConversationIn, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    event = get_event(db, body.event_id)
    return conversations.start_as_manager(db, user, event, body.text)

@router.get("/conversations/{conv_id}/messages", response_model=List[MessageOut])
def conversation_messages(conv_id: int, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    return conversations.get_for_participant(db, conv_id, user, "manager").messages

@router.post("/conversations/{conv_id}/messages", response_model=List[MessageOut])
def send_message(conv_id: int, body: MessageIn, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    conv = conversations.get_for_participant(db, conv_id, user, "manager")
    return conversations.post_message(db, conv, "manager", body.text).messages

# ---------------------------
# Resources (inventory)
# ---------------------------

def _own_resource(db: Session, resource_id: int, user: User) -> Resource:
    r = resource_crud.get_or_404(db, resource_id)
    if r.manager_id != user.id:
        raise NotFound("Not found")
    return r

def _check_resource_type(value: Optional[str]) -> None:
    if value is not None and value not in {t.value for t in ResourceType}:
        raise ValidationFailed("Invalid resource type")

@router.get("/resources", response_model=List[ResourceOut])
def list_resources(db: Session = Depends(get_db), user: User = Depends(require_staff)):
    return resource_crud.get_multi(db, Resource.manager_id == user.id, limit=500, order_by=Resource.id)

@router.post("/resources", response_model=ResourceOut, status_code=status.HTTP_201_CREATED)
def create_resource(body: ResourceIn, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Name required")
    _check_resource_type(body.type)
    body = body.model_copy(update={"name": body.name.strip(), "quantity": max(0, body.quantity)})
    return resource_crud.create(db, body, extra={"manager_id": user.id})

@router.patch("/resources/{resource_id}", response_model=ResourceOut)
def update_resource(resource_id: int, body: ResourceUpdate, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    r = _own_resource(db, resource_id, user)
    _check_resource_type(body.type)
    return resource_crud.update(db, r, body)

@router.delete("/resources/{resource_id}")
def delete_resource(resource_id: int, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    r = _own_resource(db, resource_id, user)
    resource_crud.delete(db, r)
    return {"message": "Deleted"}

# ---------------------------
# Performance / feedback / location
# ---------------------------

@router.get("/performance")
def performance(db: Session = Depends(get_db), user: User = Depends(require_staff)):
    return analytics.manager_summary(db, user.id)

@router.get("/feedback", response_model=List[FeedbackOut])
def my_feedback(db: Session = Depends(get_db), user: User = Depends(require_staff)):
    return db.scalars(select(Feedback).where(Feedback.manager_id == user.id).order_by(Feedback.created_at.desc(), Feedback.id.desc())).all()

@router.patch("/feedback/{feedback_id}/reply", response_model=FeedbackOut)
def reply_feedback(feedback_id: int, body: FeedbackReplyIn, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    fb = db.get(Feedback, feedback_id)
    if fb is None or fb.manager_id != user.id:
        raise NotFound("Not found")
    return reply_to_feedback(db, fb, body.reply)

@router.patch("/me/location")
def update_location(body: ManagerLocationIn, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    if body.lat is not None:
        user.lat = body.lat
    if body.lng is not None:
        user.lng = body.lng
    if body.city is not None:
        user.city = body.city.strip()
    db.commit(); db.refresh(user)
    return user.location
