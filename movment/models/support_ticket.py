from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, ForeignKey
from movment.db.base import Base
from movment.db.types import UTCDateTime, utcnow


class SupportTicket(Base):
    __tablename__ = "support_tickets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    subject: Mapped[str] = mapped_column(String(200))
    message: Mapped[str] = mapped_column(Text())
    status: Mapped[str] = mapped_column(String(20), default="open", index=True)
    category: Mapped[str] = mapped_column(String(20), default="query", index=True)
    related_event_id: Mapped[Optional[int]] = mapped_column(ForeignKey("events.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", lazy="joined")
    replies = relationship(
        "SupportTicketReply",
        back_populates="ticket",
        order_by="SupportTicketReply.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class SupportTicketReply(Base):
    __tablename__ = "support_ticket_replies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    ticket_id: Mapped[int] = mapped_column(ForeignKey("support_tickets.id"), index=True)
    sender: Mapped[str] = mapped_column(String(10))  # "user" | "support"
    message: Mapped[str] = mapped_column(Text())
    at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    ticket = relationship("SupportTicket", back_populates="replies")
