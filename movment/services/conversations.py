# movment/services/conversations.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from movment.core.errors import NotFound, PermissionDenied, ValidationFailed
from movment.db.types import utcnow
from movment.models.conversation import ConversationMessage, ManagerConversation
from movment.models.enums import ELEVATED_ROLES
from movment.models.event import Event
from movment.models.user import User


def find_for_event(db: Session, event_id: int, user_id: int) -> Optional[ManagerConversation]:
    return db.scalar(
        select(ManagerConversation).where(ManagerConversation.event_id == event_id, ManagerConversation.user_id == user_id)
    )


def open_for_event(db: Session, event: Event) -> Optional[ManagerConversation]:
    """Existing thread for the event's booker, or a new one once a manager is assigned."""
    conv = find_for_event(db, event.id, event.booked_by_id)
    if conv is None and event.assigned_manager_id is not None:
        conv = ManagerConversation(event_id=event.id, user_id=event.booked_by_id, manager_id=event.assigned_manager_id)
        db.add(conv)
        db.commit()
        db.refresh(conv)
    return conv


def start_as_manager(db: Session, manager: User, event: Event, text: Optional[str] = None) -> ManagerConversation:
    if event.assigned_manager_id != manager.id and manager.role not in ELEVATED_ROLES:
        raise PermissionDenied("You are not assigned to this event")
    conv = find_for_event(db, event.id, event.booked_by_id)
    if conv is None:
        conv = ManagerConversation(event_id=event.id, user_id=event.booked_by_id, manager_id=manager.id)
        db.add(conv)
        db.flush()
    if text and text.strip():
        db.add(ConversationMessage(conversation_id=conv.id, sender="manager", text=text.strip()))
    db.commit()
    db.refresh(conv)
    return conv


def get_for_participant(db: Session, conv_id: int, user: User, side: str) -> ManagerConversation:
    conv = db.get(ManagerConversation, conv_id)
    owner_id = None if conv is None else (conv.user_id if side == "user" else conv.manager_id)
    if conv is None or (owner_id != user.id and not (side == "manager" and user.role in ELEVATED_ROLES)):
        raise NotFound("Not found")
    return conv


def post_message(db: Session, conv: ManagerConversation, sender: str, text: Optional[str]) -> ManagerConversation:
    if not text or not text.strip():
        raise ValidationFailed("Message required")
    db.add(ConversationMessage(conversation_id=conv.id, sender=sender, text=text.strip()))
    conv.updated_at = utcnow()
    db.commit()
    db.refresh(conv)
    return conv
