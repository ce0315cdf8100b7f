from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, ForeignKey
from movment.db.base import Base
from movment.db.types import UTCDateTime, utcnow


class ManagerConversation(Base):
    __tablename__ = "manager_conversations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    manager_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    event = relationship("Event", lazy="joined")
    user = relationship("User", foreign_keys=[user_id], lazy="joined")
    manager = relationship("User", foreign_keys=[manager_id], lazy="joined")
    messages = relationship(
        "ConversationMessage",
        back_populates="conversation",
        order_by="ConversationMessage.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ConversationMessage(Base):
    __tablename__ = "conversation_messages"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    conversation_id: Mapped[int] = mapped_column(ForeignKey("manager_conversations.id"), index=True)
    sender: Mapped[str] = mapped_column(String(10))  # "user" | "manager"
    text: Mapped[str] = mapped_column(Text())
    at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    conversation = relationship("ManagerConversation", back_populates="messages")
