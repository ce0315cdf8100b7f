from typing import Optional, List
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, Float, JSON
from movment.db.base import Base
from movment.db.types import UTCDateTime, utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), default="user", index=True)
    approved: Mapped[bool] = mapped_column(Boolean, default=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True, index=True)
    profile_picture: Mapped[str] = mapped_column(String(500), default="")

    # location
    city: Mapped[Optional[str]] = mapped_column(String(120), nullable=True, index=True)
    area: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    address_line: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    preferred_event_types: Mapped[List[str]] = mapped_column(JSON, default=list)
    preferred_city: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    @property
    def location(self) -> dict:
        coords = {"lat": self.lat, "lng": self.lng} if self.lat is not None and self.lng is not None else None
        return {"city": self.city, "area": self.area, "addressLine": self.address_line, "coordinates": coords}
