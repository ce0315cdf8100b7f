from typing import Optional, List, Dict, Any
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Integer, Float, ForeignKey, JSON
from movment.db.base import Base
from movment.db.types import UTCDateTime, utcnow


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    booked_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    assigned_manager_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    assigned_team: Mapped[List[str]] = mapped_column(JSON, default=list)

    type: Mapped[str] = mapped_column(String(32))
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    scheduled_at: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
    guest_count: Mapped[int] = mapped_column(Integer, default=1)
    venue: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # location
    address_line: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(120), index=True)
    pincode: Mapped[str] = mapped_column(String(20))
    landmark: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    map_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    additional_services: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    custom_requests: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)

    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    auto_assign_deadline: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True, index=True)
    reminder_sent_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    booked_by = relationship("User", foreign_keys=[booked_by_id], lazy="joined")
    assigned_manager = relationship("User", foreign_keys=[assigned_manager_id], lazy="joined")
    status_history = relationship(
        "EventStatusChange",
        back_populates="event",
        order_by="EventStatusChange.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def location(self) -> Dict[str, Any]:
        coords = {"lat": self.lat, "lng": self.lng} if self.lat is not None and self.lng is not None else None
        return {
            "addressLine": self.address_line,
            "city": self.city,
            "pincode": self.pincode,
            "landmark": self.landmark,
            "coordinates": coords,
            "mapLink": self.map_link,
        }


class EventStatusChange(Base):
    """Append-only audit row for every status transition of an Event."""

    __tablename__ = "event_status_history"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), index=True)
    status: Mapped[str] = mapped_column(String(20))
    at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)

    event = relationship("Event", back_populates="status_history")
