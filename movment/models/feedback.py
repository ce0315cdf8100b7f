from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, Text, ForeignKey, UniqueConstraint
from movment.db.base import Base
from movment.db.types import UTCDateTime, utcnow


class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_feedback_event_user"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    manager_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    rating: Mapped[int] = mapped_column(Integer)
    comment: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    manager_reply: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    manager_replied_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    service_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, index=True)

    event = relationship("Event", lazy="joined")
    user = relationship("User", foreign_keys=[user_id], lazy="joined")
