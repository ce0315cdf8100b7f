# movment/schemas/event.py
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

from movment.schemas.common import CamelModel
from movment.schemas.user import UserSummary

# ---------------------------
# Input
# ---------------------------

class EventCreate(CamelModel):
    # required fields are checked by the lifecycle service, which reports them all as "Missing required fields"
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    guest_count: Optional[int] = None
    venue: Optional[str] = None
    address_line: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None
    landmark: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    map_link: Optional[str] = None
    additional_services: List[Any] = []
    custom_requests: Optional[str] = None


class StatusIn(CamelModel):
    status: str


class RescheduleIn(CamelModel):
    scheduled_at: Optional[datetime] = None


class TeamIn(CamelModel):
    # plain names or {"name": ...} objects
    team: List[Any] = []

    def names(self) -> List[str]:
        out = [t if isinstance(t, str) else str((t or {}).get("name") or "") for t in self.team]
        return [n.strip() for n in out if n and n.strip()]

# ---------------------------
# Output
# ---------------------------

class StatusChangeOut(CamelModel):
    status: str
    at: datetime
    by_id: Optional[int] = None


class EventOut(CamelModel):
    id: int
    booked_by_id: int
    assigned_manager_id: Optional[int] = None
    assigned_team: List[str] = []
    type: str
    title: str
    description: Optional[str] = None
    scheduled_at: datetime
    guest_count: int
    venue: Optional[str] = None
    location: Dict[str, Any]
    additional_services: List[Dict[str, Any]] = []
    custom_requests: Optional[str] = None
    status: str
    status_history: List[StatusChangeOut] = []
    auto_assign_deadline: Optional[datetime] = None
    reminder_sent_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class EventWithPeople(EventOut):
    booked_by: Optional[UserSummary] = None
    assigned_manager: Optional[UserSummary] = None


class NearbyEventOut(EventOut):
    distance_km: Optional[float] = None


class EventSummary(CamelModel):
    """Projection used by the admin overview table."""

    id: int
    title: str
    type: str
    status: str
    scheduled_at: datetime
    city: str
    pincode: str
    guest_count: int
    booked_by: Optional[UserSummary] = None
    assigned_manager: Optional[UserSummary] = None
    created_at: datetime
