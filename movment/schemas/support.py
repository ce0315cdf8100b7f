# movment/schemas/support.py
from datetime import datetime
from typing import List, Optional

from movment.schemas.common import CamelModel
from movment.schemas.user import UserSummary


class TicketIn(CamelModel):
    subject: Optional[str] = None
    message: Optional[str] = None
    category: str = "query"
    related_event_id: Optional[int] = None


class ReplyIn(CamelModel):
    message: Optional[str] = None


class TicketUpdate(CamelModel):
    status: Optional[str] = None
    reply: Optional[str] = None


class TicketReplyOut(CamelModel):
    sender: str
    message: str
    at: datetime


class TicketOut(CamelModel):
    id: int
    user_id: int
    subject: str
    message: str
    status: str
    category: str
    related_event_id: Optional[int] = None
    replies: List[TicketReplyOut] = []
    user: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime
