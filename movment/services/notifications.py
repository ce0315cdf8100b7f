# movment/services/notifications.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from jinja2 import Environment, BaseLoader
from sqlalchemy import event as sa_event
from sqlalchemy.orm import Session

from movment.core.config import settings
from movment.models.enums import NotificationType
from movment.models.event import Event
from movment.models.notification import Notification
from movment.models.user import User
from movment.services.delivery import send_email

logger = logging.getLogger(__name__)

_env = Environment(loader=BaseLoader(), autoescape=False, trim_blocks=True, lstrip_blocks=True)

EMAIL_TEMPLATE = _env.from_string(
    """Hi {{ name }},

{{ body }}

{% if event %}
Event: {{ event.title }}
When: {{ when }}
Where: {{ event.address_line }}, {{ event.city }} {{ event.pincode }}
{% endif %}

- {{ company }}
"""
)

# notification types that are also emailed to the recipient
EMAILED_TYPES = {NotificationType.BOOKING_CONFIRMATION.value, NotificationType.REMINDER.value}

# session.info key holding (to, subject, text) tuples waiting for commit
PENDING_EMAILS = "movment_pending_emails"


@sa_event.listens_for(Session, "after_commit")
def _send_pending_emails(session: Session) -> None:
    for to, subject, text in session.info.pop(PENDING_EMAILS, []):
        send_email(to, subject, text)


@sa_event.listens_for(Session, "after_soft_rollback")
def _drop_pending_emails(session: Session, previous_transaction) -> None:
    dropped = session.info.pop(PENDING_EMAILS, [])
    if dropped:
        logger.info("Dropped %d queued email(s) after rollback", len(dropped))


def format_when(value: datetime) -> str:
    return value.strftime("%d %b %Y, %H:%M UTC")


def booking_confirmation_body(event: Event) -> str:
    return f'Your event "{event.title}" is scheduled for {format_when(event.scheduled_at)}.'


def render_email(user: User, body: str, event: Optional[Event] = None) -> str:
    return EMAIL_TEMPLATE.render(
        name=user.name,
        body=body,
        event=event,
        when=format_when(event.scheduled_at) if event else "",
        company=settings.INVOICE_COMPANY_NAME,
    )


def notify(
    db: Session,
    user_id: int,
    type: str,
    title: str,
    body: str = "",
    *,
    event: Optional[Event] = None,
    link: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Notification:
    """
    Adds a Notification for ``user_id`` to the session (no commit).

    Booking confirmations and reminders are also emailed through the delivery
    stub, but only once the caller's transaction commits; a rolled back
    transaction drops its queued mail. Delivery problems never affect the
    stored notification.
    """
    n = Notification(
        user_id=user_id,
        type=type,
        title=title,
        body=body,
        link=link,
        related_event_id=event.id if event is not None else None,
    )
    if created_at is not None:
        n.created_at = created_at
    db.add(n)

    if type in EMAILED_TYPES:
        user = db.get(User, user_id)
        if user is not None and user.email:
            db.info.setdefault(PENDING_EMAILS, []).append((user.email, title, render_email(user, body, event)))
    return n


def notify_many(db: Session, user_ids: Iterable[int], type: str, title: str, body: str = "", *, link: Optional[str] = None) -> List[Notification]:
    rows = [notify(db, uid, type, title, body, link=link) for uid in dict.fromkeys(user_ids)]
    logger.info("Queued %d %s notifications", len(rows), type)
    return rows
