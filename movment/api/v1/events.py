# movment/api/v1/events.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from movment.core.rbac import require_booker, require_staff
from movment.api.deps import get_current_user
from movment.db.session import get_db
from movment.models.enums import ADDITIONAL_SERVICES, EventStatus, EventType
from movment.models.event import Event
from movment.models.user import User
from movment.schemas.event import EventCreate, EventOut, NearbyEventOut, RescheduleIn, StatusIn
from movment.services import analytics, lifecycle
from movment.services.geo import haversine_km

router = APIRouter()

PACKAGES = [
    {"type": "birthday", "services": ["decoration", "food", "music_dj"], "label": "Classic Birthday Package", "theme": "Balloons & cake", "venueType": "Indoor/outdoor"},
    {"type": "farewell", "services": ["decoration", "food", "photography"], "label": "Farewell Party Package", "theme": "Memories & send-off", "venueType": "Hall"},
    {"type": "software_launch", "services": ["venue_setup", "equipment", "catering"], "label": "Product Launch Package", "theme": "Professional demo", "venueType": "Conference / auditorium"},
    {"type": "anniversary", "services": ["decoration", "photography", "food"], "label": "Anniversary Celebration", "theme": "Elegant & romantic", "venueType": "Banquet hall"},
    {"type": "corporate", "services": ["venue_setup", "equipment", "catering"], "label": "Corporate Event", "theme": "Business formal", "venueType": "Hotel / conference"},
]
VENUE_TYPES = ["Indoor hall", "Outdoor garden", "Hotel ballroom", "Conference room", "Rooftop", "Community center"]


def suggested_staffing(guests: int) -> dict:
    if guests <= 20:
        return {"min": 1, "max": 2}
    if guests <= 50:
        return {"min": 2, "max": 4}
    return {"min": 3, "max": 6}


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(body: EventCreate, db: Session = Depends(get_db), user: User = Depends(require_booker)):
    return lifecycle.create_event(db, user, body)

@router.get("/meta")
def meta():
    return {"eventTypes": [t.value for t in EventType], "additionalServices": ADDITIONAL_SERVICES}

@router.get("/suggestions", dependencies=[Depends(require_booker)])
def suggestions(guest_count: Optional[int] = Query(None, alias="guestCount")):
    guests = max(1, guest_count or 10)
    return {"suggestions": PACKAGES, "suggestedStaffing": suggested_staffing(guests), "venueTypes": VENUE_TYPES}

@router.get("/ratings/aggregate")
def ratings_aggregate(db: Session = Depends(get_db)):
    return analytics.ratings_by_manager(db)

@router.get("/my", response_model=List[EventOut])
def my_events(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.scalars(select(Event).where(Event.booked_by_id == user.id).order_by(Event.created_at.desc(), Event.id.desc())).all()

@router.get("/pending", response_model=List[NearbyEventOut], dependencies=[Depends(require_staff)])
def pending_events(
    city: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius_km: Optional[float] = Query(None, alias="radiusKm"),
    db: Session = Depends(get_db),
):
    stmt = select(Event).where(Event.status == EventStatus.PENDING.value)
    if city:
        stmt = stmt.where(Event.city == city)
    rows = db.scalars(stmt.order_by(Event.scheduled_at)).all()
    if lat is None or lng is None or radius_km is None:
        return rows

    out = []
    for ev in rows:
        if ev.lat is None or ev.lng is None:
            continue
        dist = haversine_km(lat, lng, ev.lat, ev.lng)
        if dist <= radius_km:
            item = NearbyEventOut.model_validate(ev)
            item.distance_km = round(dist, 2)
            out.append(item)
    out.sort(key=lambda e: e.distance_km)
    return out

@router.get("/assigned", response_model=List[EventOut])
def assigned_events(db: Session = Depends(get_db), user: User = Depends(require_staff)):
    stmt = (
        select(Event)
        .where(
            Event.assigned_manager_id == user.id,
            Event.status.in_((EventStatus.ACCEPTED.value, EventStatus.IN_PROGRESS.value)),
        )
        .order_by(Event.scheduled_at)
    )
    return db.scalars(stmt).all()

@router.post("/{event_id}/accept", response_model=EventOut)
def accept(event_id: int, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    return lifecycle.accept_event(db, user, event_id)

@router.post("/{event_id}/status", response_model=EventOut)
def update_status(event_id: int, body: StatusIn, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    return lifecycle.advance_status(db, user, event_id, body.status)

@router.post("/{event_id}/cancel", response_model=EventOut)
def cancel(event_id: int, db: Session = Depends(get_db), user: User = Depends(require_booker)):
    return lifecycle.cancel_event(db, user, event_id)

@router.post("/{event_id}/reschedule", response_model=EventOut)
def reschedule(event_id: int, body: RescheduleIn, db: Session = Depends(get_db), user: User = Depends(require_booker)):
    return lifecycle.reschedule_event(db, user, event_id, body.scheduled_at)
